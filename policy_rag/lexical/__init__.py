"""
Lexical keyword extraction and section ranking.

Components:
- keywords: Frequency-based keyword extraction with important-term weighting
- ranker: Additive relevance scoring (keywords, title, context, position)

Rule-based: no embeddings, no learned ranking.
Every score component can be explained from the section text and the query.
"""

from .keywords import extract_keywords, IMPORTANT_TERMS, STOPWORDS, MAX_KEYWORDS
from .ranker import RelevanceRanker, context_relevance, relevance_score

__all__ = [
    "extract_keywords",
    "IMPORTANT_TERMS",
    "STOPWORDS",
    "MAX_KEYWORDS",
    "RelevanceRanker",
    "context_relevance",
    "relevance_score",
]
