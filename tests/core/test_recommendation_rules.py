"""Recommendation Rules — tests for due-date tiers, list moves, related cards and ordering.

Tests cover:
    - Exact keyword lists and tier precedence for due dates
    - Cards with a due date never get a due-date recommendation
    - List-move targets for in-progress and completion wording, at most one per card
    - Related cards scored by shared keywords, stable top 3
    - Final ordering high -> medium -> low, stable within a priority
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from taskboard.core.domain_types import (
    RecommendationActionType,
    RecommendationPriority,
    RecommendationType,
)
from taskboard.core.recommendation_rules import (
    DONE_KEYWORDS,
    HIGH_PRIORITY_KEYWORDS,
    IN_PROGRESS_KEYWORDS,
    URGENT_KEYWORDS,
    CardRef,
    CardSnapshot,
    ListSnapshot,
    Recommendation,
    RecommendationAction,
    analyze_due_date,
    analyze_list_move,
    build_recommendations,
    due_date_text,
    rank_related_cards,
    sort_by_priority,
)

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _lists(*titles: str) -> list[ListSnapshot]:
    return [ListSnapshot(id=uuid4(), title=t, position=i) for i, t in enumerate(titles)]


def _card(board_list: ListSnapshot, title: str, description: str | None = None, **kw) -> CardSnapshot:
    return CardSnapshot(id=uuid4(), list_id=board_list.id, title=title, description=description, **kw)


def _of_type(recs, rec_type):
    return [r for r in recs if r.type == rec_type]


# ─── keyword lists ───────────────────────────────────────────────

def test_keyword_lists_are_pinned():
    assert URGENT_KEYWORDS == ("urgent", "asap", "immediately", "critical", "emergency", "deadline")
    assert HIGH_PRIORITY_KEYWORDS == ("soon", "quickly", "fast", "high priority", "important")
    assert IN_PROGRESS_KEYWORDS == ("started", "in progress", "working on", "begun", "underway")
    assert DONE_KEYWORDS == ("done", "completed", "finished", "ready", "deployed")


# ─── analyze_due_date ────────────────────────────────────────────

@pytest.mark.parametrize(
    "text, days, priority",
    [
        ("fix login bug asap", 1, RecommendationPriority.HIGH),
        ("important customer call", 3, RecommendationPriority.MEDIUM),
        ("ship tomorrow", 1, RecommendationPriority.HIGH),
        ("review today", 0, RecommendationPriority.HIGH),
        ("sync next week", 7, RecommendationPriority.LOW),
        ("plan next month's roadmap", 30, RecommendationPriority.LOW),
    ],
)
def test_due_date_tiers(text, days, priority):
    signal = analyze_due_date(text)
    assert signal is not None
    assert (signal.days, signal.priority) == (days, priority)


def test_urgent_tier_wins_over_later_tiers():
    signal = analyze_due_date("critical fix, needed next week")
    assert (signal.days, signal.priority) == (1, RecommendationPriority.HIGH)


def test_high_tier_wins_over_today():
    signal = analyze_due_date("finish soon, ideally today")
    assert (signal.days, signal.priority) == (3, RecommendationPriority.MEDIUM)


def test_no_due_date_signal_for_plain_text():
    assert analyze_due_date("update the readme") is None


def test_due_date_text():
    assert [due_date_text(d) for d in (0, 1, 3, 7, 30)] == [
        "today", "tomorrow", "in 3 days", "next week", "next month",
    ]


# ─── analyze_list_move ───────────────────────────────────────────

def test_completion_wording_targets_done_list():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    signal = analyze_list_move(todo, "finished the report", [todo, doing, done])
    assert signal.target == done
    assert signal.priority == RecommendationPriority.HIGH


def test_in_progress_wording_targets_progress_list():
    todo, doing, done = _lists("Backlog", "Doing", "Done")
    signal = analyze_list_move(todo, "started on the api", [todo, doing, done])
    assert signal.target == doing
    assert signal.priority == RecommendationPriority.MEDIUM


def test_in_progress_wins_when_both_signals_match():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    signal = analyze_list_move(todo, "started and almost ready", [todo, doing, done])
    assert signal.target == doing


def test_no_move_when_already_in_progress_list():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    assert analyze_list_move(doing, "working on it", [todo, doing, done]) is None


def test_completion_checked_when_in_progress_target_is_current_list():
    todo, doing, done = _lists("To Do", "Doing", "Done")
    signal = analyze_list_move(doing, "started, now deployed", [todo, doing, done])
    assert signal.target == done


def test_no_move_when_already_in_done_list():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    assert analyze_list_move(done, "completed", [todo, doing, done]) is None


def test_no_move_without_matching_target_list():
    todo, review = _lists("To Do", "Review")
    assert analyze_list_move(todo, "finished", [todo, review]) is None


def test_first_matching_list_by_position_is_target():
    todo, done, finished = _lists("To Do", "Done", "Finished")
    signal = analyze_list_move(todo, "completed", [todo, done, finished])
    assert signal.target == done


# ─── rank_related_cards ──────────────────────────────────────────

def test_related_cards_ranked_by_shared_keywords():
    (todo,) = _lists("To Do")
    card = _card(todo, "database migration schema")
    one = _card(todo, "database backups")
    three = _card(todo, "review database migration schema")
    unrelated = _card(todo, "design logo")
    related = rank_related_cards(card, [card, one, three, unrelated])
    assert [r.id for r in related] == [three.id, one.id]


def test_related_cards_tie_keeps_scan_order_and_top_three():
    (todo,) = _lists("To Do")
    card = _card(todo, "invoice")
    others = [_card(todo, f"invoice {n}") for n in range(5)]
    related = rank_related_cards(card, [card, *others])
    assert [r.id for r in related] == [c.id for c in others[:3]]


def test_related_cards_excludes_self():
    (todo,) = _lists("To Do")
    card = _card(todo, "lonely card")
    assert rank_related_cards(card, [card]) == []


# ─── sort_by_priority ────────────────────────────────────────────

def _rec(name: str, priority: RecommendationPriority) -> Recommendation:
    return Recommendation(
        id=name, type=RecommendationType.DUE_DATE,
        card=CardRef(id=uuid4(), title=name), suggestion=name, priority=priority,
        action=RecommendationAction(type=RecommendationActionType.SET_DUE_DATE),
    )


def test_sort_by_priority_is_stable():
    low1 = _rec("low1", RecommendationPriority.LOW)
    high1 = _rec("high1", RecommendationPriority.HIGH)
    med = _rec("med", RecommendationPriority.MEDIUM)
    high2 = _rec("high2", RecommendationPriority.HIGH)
    low2 = _rec("low2", RecommendationPriority.LOW)
    ordered = sort_by_priority([low1, high1, med, high2, low2])
    assert [r.id for r in ordered] == ["high1", "high2", "med", "low1", "low2"]


# ─── build_recommendations ───────────────────────────────────────

def test_asap_card_gets_one_day_high_due_date():
    (todo,) = _lists("To Do")
    card = _card(todo, "Fix login bug ASAP")
    recs = build_recommendations([todo], [card], NOW)
    (due,) = _of_type(recs, RecommendationType.DUE_DATE)
    assert due.id == f"due-{card.id}"
    assert due.priority == RecommendationPriority.HIGH
    assert due.action.type == RecommendationActionType.SET_DUE_DATE
    assert due.action.due_date == NOW + timedelta(days=1)
    assert due.suggestion == 'Set due date for "Fix login bug ASAP" - tomorrow'


def test_next_month_card_gets_thirty_day_low_due_date():
    (todo,) = _lists("To Do")
    card = _card(todo, "Plan next month's roadmap")
    (due,) = _of_type(build_recommendations([todo], [card], NOW), RecommendationType.DUE_DATE)
    assert due.priority == RecommendationPriority.LOW
    assert due.action.due_date == NOW + timedelta(days=30)


def test_card_with_due_date_never_gets_due_date_recommendation():
    (todo,) = _lists("To Do")
    card = _card(todo, "Fix login bug ASAP today", due_date=NOW)
    assert _of_type(build_recommendations([todo], [card], NOW), RecommendationType.DUE_DATE) == []


def test_finished_card_in_todo_moves_to_done():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    card = _card(todo, "finished the report")
    (move,) = _of_type(build_recommendations([todo, doing, done], [card], NOW), RecommendationType.LIST_MOVE)
    assert move.id == f"move-{card.id}"
    assert move.action.target_list_id == done.id
    assert move.suggestion == 'Move to "Done" - card content suggests completion'


def test_single_list_board_gets_no_list_move():
    (todo,) = _lists("In Progress Done")
    card = _card(todo, "started and finished")
    assert _of_type(build_recommendations([todo], [card], NOW), RecommendationType.LIST_MOVE) == []


def test_at_most_one_list_move_per_card():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    card = _card(todo, "started", "and completed")
    moves = _of_type(build_recommendations([todo, doing, done], [card], NOW), RecommendationType.LIST_MOVE)
    assert len(moves) == 1


def test_cards_sharing_keywords_reference_each_other():
    (todo,) = _lists("To Do")
    first = _card(todo, "Write database migration schema")
    second = _card(todo, "Review database migration schema")
    loner = _card(todo, "Order office plants")
    recs = _of_type(build_recommendations([todo], [first, second, loner], NOW), RecommendationType.RELATED_CARDS)
    by_card = {r.card.id: r for r in recs}
    assert [c.id for c in by_card[first.id].action.related_cards] == [second.id]
    assert [c.id for c in by_card[second.id].action.related_cards] == [first.id]
    assert loner.id not in by_card
    assert by_card[first.id].suggestion == '"Write database migration schema" is related to 1 other card'
    assert by_card[first.id].priority == RecommendationPriority.LOW


def test_cards_on_unknown_lists_are_skipped():
    (todo,) = _lists("To Do")
    (stray,) = _lists("Elsewhere")
    card = _card(stray, "urgent thing")
    assert build_recommendations([todo], [card], NOW) == []


def test_board_output_sorted_high_first_preserving_scan_order():
    todo, doing, done = _lists("To Do", "In Progress", "Done")
    cards = [
        _card(todo, "sync next week"),            # due low
        _card(todo, "urgent hotfix"),             # due high
        _card(todo, "working on docs"),           # move medium
        _card(todo, "finished deploy notes"),     # move high
    ]
    recs = build_recommendations([todo, doing, done], cards, NOW)
    assert [r.priority for r in recs] == sorted(
        (r.priority for r in recs),
        key=[RecommendationPriority.HIGH, RecommendationPriority.MEDIUM, RecommendationPriority.LOW].index,
    )
    highs = [r.id for r in recs if r.priority == RecommendationPriority.HIGH]
    assert highs == [f"due-{cards[1].id}", f"move-{cards[3].id}"]
