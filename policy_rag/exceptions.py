"""Exceptions raised by the ingestion and chat flows"""


class PolicyRAGError(Exception):
    """Base class for Policy RAG errors"""


class TextExtractionError(PolicyRAGError):
    """Text could not be extracted from an uploaded document"""


class EmptyDocumentError(PolicyRAGError):
    """Extraction succeeded but produced no usable text"""


class StoreError(PolicyRAGError):
    """Document store rejected or failed an operation"""


class GenerationError(PolicyRAGError):
    """Language model call failed or returned no text"""
