"""
Policy metadata extraction (title, version, effective date).

Each field is an explicit fallback chain: ordered patterns are tried one by
one, the first usable result wins, and a hard default closes the chain.
Nothing here raises on unparseable input.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DEFAULT_VERSION = "1.0"

VERSION_PATTERNS = (
    re.compile(r'버전[:\s]*([0-9.]+)', re.IGNORECASE),
    re.compile(r'version[:\s]*([0-9.]+)', re.IGNORECASE),
    re.compile(r'개정[:\s]*([0-9.]+)', re.IGNORECASE),
    re.compile(r'\(([0-9.]+)\s*개정\)'),
    re.compile(r'제([0-9.]+)\s*차\s*개정'),
)

# 2024-01-15 / 2024/1/15 / 2024년 1월 15일
_DATE = r'(\d{4}[-/년]\s*\d{1,2}[-/월]\s*\d{1,2}일?)'

DATE_PATTERNS = (
    re.compile(r'시행일자?[:\s]*' + _DATE),
    re.compile(r'시행\s*' + _DATE),
    re.compile(_DATE + r'\s*시행'),
    re.compile(r'개정일자?[:\s]*' + _DATE),
)

_PDF_SUFFIX = re.compile(r'\.pdf$', re.IGNORECASE)
_DATE_UNITS = re.compile(r'[년월일]')
_DATE_SEPARATORS = re.compile(r'[\s/-]+')


@dataclass
class PolicyMetadata:
    title: str
    version: str
    effective_date: datetime


def extract_title(filename: str) -> str:
    """Filename without a trailing .pdf extension (case-insensitive)"""
    return _PDF_SUFFIX.sub('', filename)


def extract_version(text: str) -> str:
    """
    Find the policy version.

    Examples:
        >>> extract_version("버전: 2.3")
        '2.3'
        >>> extract_version("(3.1 개정)")
        '3.1'
        >>> extract_version("no version here")
        '1.0'
    """
    for pattern in VERSION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return DEFAULT_VERSION


def clean_date_string(raw: str) -> str:
    """
    Normalize a matched date to "YYYY-M-D".

    Examples:
        >>> clean_date_string("2024년 1월 15일")
        '2024-1-15'
        >>> clean_date_string("2024/01/15")
        '2024-01-15'
    """
    without_units = _DATE_UNITS.sub(' ', raw)
    return _DATE_SEPARATORS.sub('-', without_units.strip())


def parse_date(cleaned: str) -> Optional[datetime]:
    """
    Parse a cleaned "YYYY-M-D" string.

    Returns:
        datetime at midnight, or None for malformed or impossible dates
        (e.g. 2024-02-30)
    """
    parts = cleaned.split('-')
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None

    year, month, day = (int(part) for part in parts)
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def extract_effective_date(text: str, now: Optional[datetime] = None) -> datetime:
    """
    Find the policy effective date.

    A pattern whose match does not parse as a calendar date is skipped and
    the next pattern is tried.

    Args:
        text: Document text
        now: Default when nothing usable is found (defaults to datetime.now())
    """
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        parsed = parse_date(clean_date_string(match.group(1)))
        if parsed is not None:
            return parsed

    return now if now is not None else datetime.now()


def extract_metadata(filename: str, text: str, now: Optional[datetime] = None) -> PolicyMetadata:
    """
    Extract title, version and effective date for an uploaded policy.

    Args:
        filename: Original upload filename
        text: Extracted document text
        now: Effective date default (defaults to the current time)

    Example:
        >>> meta = extract_metadata("policy_v2.3.pdf", "버전: 2.3 ... 시행일자: 2024-01-15")
        >>> meta.title, meta.version, meta.effective_date.date()
        ('policy_v2.3', '2.3', datetime.date(2024, 1, 15))
    """
    return PolicyMetadata(
        title=extract_title(filename),
        version=extract_version(text),
        effective_date=extract_effective_date(text, now=now),
    )
