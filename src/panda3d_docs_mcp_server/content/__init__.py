from .extract import clean_text, extract_content, extract_document_text

__all__ = ["clean_text", "extract_content", "extract_document_text"]
