"""Text Signals — tests for keyword scanning and extraction.

Tests cover:
    - card_text joins title and description, lowercased, empty when missing
    - matches_any is case-insensitive substring containment
    - extract_keywords drops short tokens and stop words, keeps first 5 in order
"""

from taskboard.core.text_signals import (
    STOP_WORDS,
    card_text,
    extract_keywords,
    matches_any,
)


def test_card_text_without_description():
    assert card_text("Fix Login", None) == "fix login "


def test_card_text_with_description():
    assert card_text("Fix Login", "Users See 500") == "fix login users see 500"


def test_matches_any_is_case_insensitive():
    assert matches_any("Deploy ASAP please", ("asap",))


def test_matches_any_is_substring_not_word_match():
    assert matches_any("already underwayish", ("underway",))


def test_matches_any_false_when_no_keyword():
    assert not matches_any("plain card", ("urgent", "asap"))


def test_stop_words_are_pinned():
    assert STOP_WORDS == {"the", "this", "that", "with", "from", "have", "are"}


def test_extract_keywords_drops_short_tokens_and_stop_words():
    text = "this is the database migration with schema from prod"
    assert extract_keywords(text) == ["database", "migration", "schema", "prod"]


def test_extract_keywords_keeps_first_five_in_order():
    text = "alpha bravo charlie delta echoes foxtrot golf"
    assert extract_keywords(text) == ["alpha", "bravo", "charlie", "delta", "echoes"]


def test_extract_keywords_lowercases():
    assert extract_keywords("Database MIGRATION") == ["database", "migration"]


def test_extract_keywords_keeps_duplicates_and_punctuation():
    assert extract_keywords("report, report again") == ["report,", "report", "again"]


def test_extract_keywords_empty_text():
    assert extract_keywords("   ") == []
