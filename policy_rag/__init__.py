"""
Policy RAG: insurance policy segmentation and lexical retrieval.

Core (pure, synchronous):
- lexical.extract_keywords    text -> up to 10 weighted terms
- sections.segment            document text -> titled, keyword-annotated sections
- sections.extract_metadata   filename + text -> title, version, effective date
- lexical.RelevanceRanker     query + sections -> top 3 scored matches
"""

from .models import ChatMessage, PolicyDocument, QueryMatch, Section
from .lexical import RelevanceRanker, extract_keywords
from .sections import extract_metadata, segment

__all__ = [
    "ChatMessage",
    "PolicyDocument",
    "QueryMatch",
    "Section",
    "RelevanceRanker",
    "extract_keywords",
    "extract_metadata",
    "segment",
]
