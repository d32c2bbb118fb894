"""
Heading patterns for policy document segmentation.

Patterns are evaluated top to bottom for every line and the first match wins.
The order is part of the segmentation contract: a topic word that also looks
like an article heading is resolved by its position in this tuple, so
reordering changes results.
"""

import re
from typing import Optional, Tuple

GENERAL_SECTION_TITLE = '일반사항'

# Top-level topic words that open a section on their own
TOPIC_WORDS = (
    '일반사항', '보장종목', '보상내용', '보험금', '계약',
    '보험료', '해지', '분쟁', '기타사항',
)

# Nouns that end an unnumbered Hangul heading
HEADING_NOUNS = ('보험금', '계약', '약관', '특별약관', '배상', '보상', '지급')

HEADING_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    # 제1장 총칙 / 2편 보통약관 / 3부 ...
    ("chapter", re.compile(r'^제?\s*(\d+)\s*[장편부]\s*(.+)')),
    ("chapter_en", re.compile(r'^Chapter\s*(\d+)\s*(.+)', re.IGNORECASE)),
    # 제1절 ...
    ("subsection", re.compile(r'^제?\s*(\d+)\s*절\s*(.+)')),
    ("topic", re.compile(r'^(' + '|'.join(TOPIC_WORDS) + r')(.+)?')),
    ("chapter_full", re.compile(r'^제\s*(\d+)\s*[장편부]\s*([가-힣\s]+)')),
    # 상해보험 보통약관 / 배상책임 특별약관
    ("noun_heading", re.compile(r'^([가-힣\s]{2,})(' + '|'.join(HEADING_NOUNS) + r')$')),
    # 제3조(보험금의 지급사유) / 제4조 （보험금 지급에 관한 세부규정）
    ("article", re.compile(r'^제?\s*(\d+)\s*조\s*[(（]?([^）)]+)[)）]?')),
)


def match_heading(line: str) -> Optional[re.Match]:
    """
    Find the first heading pattern matching a line.

    Args:
        line: Sanitized, non-empty line

    Returns:
        Match object of the highest-priority pattern, or None for body text
    """
    for _, pattern in HEADING_PATTERNS:
        match = pattern.match(line)
        if match:
            return match
    return None


def heading_title(match: re.Match, line: str) -> str:
    """
    Pick the section title from a heading match.

    Group 2 holds the descriptive title when a pattern captures a leading
    number in group 1, so it is preferred; group 1 is next, then the line.
    """
    groups = match.groups()
    for index in (1, 0):
        if index < len(groups) and groups[index]:
            return groups[index]
    return line
