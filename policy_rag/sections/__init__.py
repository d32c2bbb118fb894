"""
Policy document structure: heading patterns, segmentation and metadata.

Components:
- patterns: Ordered heading patterns (first match wins)
- segmenter: Line-based section segmentation with keyword annotation
- metadata: Title / version / effective-date extraction with fallback defaults
"""

from .patterns import HEADING_PATTERNS, GENERAL_SECTION_TITLE, match_heading, heading_title
from .segmenter import segment, sanitize_line, split_lines
from .metadata import PolicyMetadata, extract_metadata, extract_version, extract_effective_date

__all__ = [
    "HEADING_PATTERNS",
    "GENERAL_SECTION_TITLE",
    "match_heading",
    "heading_title",
    "segment",
    "sanitize_line",
    "split_lines",
    "PolicyMetadata",
    "extract_metadata",
    "extract_version",
    "extract_effective_date",
]
