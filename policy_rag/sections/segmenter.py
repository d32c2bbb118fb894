"""
Split extracted policy text into titled sections.

Segmentation is a single pass over sanitized lines:
- heading line  -> close the open section (keywords computed now), open a new one
- body line     -> append to the open section, or open the default
                   "일반사항" section if the document starts with body text
- end of input  -> close the open section

Only one section is mutable at a time. Keywords are always computed from the
complete section content, never from a partial accumulation.
"""

import logging
import re
from typing import List, Optional

from ..lexical.keywords import extract_keywords
from ..models import Section
from .patterns import GENERAL_SECTION_TITLE, heading_title, match_heading

logger = logging.getLogger(__name__)

# C0 and C1 control characters (NUL included)
_CONTROL_CHARS = re.compile(r'[\x00-\x1F\x7F-\x9F]')
_WHITESPACE_RUN = re.compile(r'\s+')


def sanitize_line(line: str) -> str:
    """
    Clean one line of extracted text.

    Removes control characters (tabs included), collapses whitespace runs
    and trims the edges.

    Examples:
        >>> sanitize_line("  제1장\\x00  총칙 ")
        '제1장 총칙'
    """
    line = _CONTROL_CHARS.sub('', line)
    line = _WHITESPACE_RUN.sub(' ', line)
    return line.strip()


def split_lines(text: str) -> List[str]:
    """Split text into sanitized, non-empty lines"""
    if not text:
        return []
    lines = (sanitize_line(line) for line in text.split('\n'))
    return [line for line in lines if line]


def _close(section: Section, sections: List[Section]):
    section.keywords = extract_keywords(section.content)
    sections.append(section)


def segment(document_text: str) -> List[Section]:
    """
    Segment a document into ordered, keyword-annotated sections.

    Args:
        document_text: Raw text from the extraction step

    Returns:
        Sections in document order (empty list for blank text)

    Example:
        >>> [(s.title, s.order) for s in segment("제1장 총칙\\n내용1\\n제2장 보상\\n내용2")]
        [('총칙', 0), ('보상', 1)]
    """
    lines = split_lines(document_text)
    logger.debug(f"Segmenting {len(lines)} lines")

    sections: List[Section] = []
    current: Optional[Section] = None
    order = 0

    for line in lines:
        match = match_heading(line)

        if match:
            if current is not None:
                _close(current, sections)
            current = Section(
                title=heading_title(match, line),
                content=line + '\n',
                order=order,
            )
            order += 1
            continue

        if current is not None:
            current.content += line + '\n'
        else:
            # Body text before the first heading
            current = Section(
                title=GENERAL_SECTION_TITLE,
                content=line + '\n',
                order=order,
            )
            order += 1

    if current is not None:
        _close(current, sections)

    logger.info(f"Segmented document into {len(sections)} sections")
    for section in sections:
        logger.debug(
            f"Section #{section.order}: '{section.title}' "
            f"({len(section.content)} chars, keywords={section.keywords})"
        )

    return sections
