"""Text Signals — keyword scanning and keyword extraction over card text.

Invariants:
    - Card text is title + " " + description, lowercased; missing description is ""
    - matches_any is plain substring containment (no word boundaries)
    - extract_keywords returns at most 5 tokens, in original order

Design Decisions:
    - Deliberately crude: whitespace split, length filter, tiny stop list, no stemming
"""

from collections.abc import Iterable

MAX_KEYWORDS = 5
MIN_KEYWORD_LENGTH = 4

STOP_WORDS = frozenset({"the", "this", "that", "with", "from", "have", "are"})


def card_text(title: str, description: str | None) -> str:
    return f"{title} {description or ''}".lower()


def matches_any(text: str, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs as a substring of text (case-insensitive)."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def extract_keywords(text: str) -> list[str]:
    """First 5 whitespace tokens longer than 3 chars that are not stop words."""
    keywords = []
    for token in text.lower().split():
        if len(token) < MIN_KEYWORD_LENGTH or token in STOP_WORDS:
            continue
        keywords.append(token)
        if len(keywords) == MAX_KEYWORDS:
            break
    return keywords
