"""
Frequency-based keyword extraction for policy sections and user queries.

Extraction pipeline:
1. Replace punctuation/symbols with spaces (letters of any script and digits survive)
2. Split on whitespace
3. Filter short tokens (< 2 chars) and stopwords (common Korean function words)
4. Count occurrences, important insurance terms weigh 4 per occurrence instead of 1
5. Return the top 10 terms by weight (ties keep first-seen order)

The same extractor is used on section content at ingestion time and on the
user query at search time, so both sides produce comparable term lists.
"""

import re
from typing import Dict, List

MAX_KEYWORDS = 10
MIN_TOKEN_LENGTH = 2
IMPORTANT_TERM_BONUS = 3

# Korean function words that carry no ranking signal
STOPWORDS = frozenset([
    '및', '또는', '등', '것', '수', '그', '이', '저',
    '때문', '이런', '저런', '하다', '되다',
])

# Domain terms that dominate policy questions
IMPORTANT_TERMS = frozenset([
    '보험금', '보상', '면책', '계약', '해지', '납입', '사고', '보장',
])

# Anything that is not a letter, digit or whitespace (underscore counts as symbol)
_NON_WORD = re.compile(r'[^\w\s]|_')


def term_weights(text: str) -> Dict[str, int]:
    """
    Count weighted term frequencies in first-seen order.

    Args:
        text: Raw section content or query

    Returns:
        Insertion-ordered mapping {term: weight}

    Examples:
        >>> term_weights("보험금 청구 보험금")
        {'보험금': 8, '청구': 1}
    """
    if not text:
        return {}

    tokens = _NON_WORD.sub(' ', text).split()

    weights: Dict[str, int] = {}
    for token in tokens:
        if len(token) < MIN_TOKEN_LENGTH or token in STOPWORDS:
            continue
        weights[token] = weights.get(token, 0) + 1
        if token in IMPORTANT_TERMS:
            weights[token] += IMPORTANT_TERM_BONUS

    return weights


def extract_keywords(text: str) -> List[str]:
    """
    Extract up to 10 salient terms from text.

    Args:
        text: Input text

    Returns:
        Distinct terms sorted by descending weight

    Examples:
        >>> extract_keywords("보험금 보험금 보험금 계약 계약")
        ['보험금', '계약']

        >>> extract_keywords("제3조(보험금의 지급사유) 회사는 보험금을 지급합니다.")
        ['제3조', '보험금의', '지급사유', '회사는', '보험금을', '지급합니다']

        >>> extract_keywords("   ")
        []
    """
    weights = term_weights(text)

    # sorted() is stable: equal weights keep first-seen order
    ranked = sorted(weights.items(), key=lambda item: item[1], reverse=True)

    return [term for term, _ in ranked[:MAX_KEYWORDS]]
