"""Recommendation Rules — pure keyword rules producing ranked board suggestions.

Invariants:
    - Due-date tiers are checked in fixed precedence; first match wins
    - A card with a due date never receives a due-date recommendation
    - At most one list-move recommendation per card; in-progress is checked first
    - Related cards: score = number of extracted keywords found in the other card,
      score > 0 kept, stable sort by descending score, top 3
    - Final output is a stable sort by priority: high, medium, low
    - Output is a pure function of (lists, cards, now)

Design Decisions:
    - Fixed keyword tuples, not a pluggable scorer: the keyword lists are the contract
    - Snapshots are frozen dataclasses so ORM rows never leak into the core
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from taskboard.core.domain_types import (
    CardId,
    ListId,
    RecommendationActionType,
    RecommendationPriority,
    RecommendationType,
)
from taskboard.core.text_signals import card_text, extract_keywords, matches_any

URGENT_KEYWORDS = ("urgent", "asap", "immediately", "critical", "emergency", "deadline")
HIGH_PRIORITY_KEYWORDS = ("soon", "quickly", "fast", "high priority", "important")
IN_PROGRESS_KEYWORDS = ("started", "in progress", "working on", "begun", "underway")
DONE_KEYWORDS = ("done", "completed", "finished", "ready", "deployed")

IN_PROGRESS_LIST_MARKERS = ("progress", "doing")
DONE_LIST_MARKERS = ("done", "completed", "finished")

# (keywords, offset in days, priority) in precedence order
DUE_DATE_TIERS: tuple[tuple[tuple[str, ...], int, RecommendationPriority], ...] = (
    (URGENT_KEYWORDS, 1, RecommendationPriority.HIGH),
    (HIGH_PRIORITY_KEYWORDS, 3, RecommendationPriority.MEDIUM),
    (("tomorrow",), 1, RecommendationPriority.HIGH),
    (("today",), 0, RecommendationPriority.HIGH),
    (("next week",), 7, RecommendationPriority.LOW),
    (("next month",), 30, RecommendationPriority.LOW),
)

MAX_RELATED_CARDS = 3

_PRIORITY_ORDER = {
    RecommendationPriority.HIGH: 0,
    RecommendationPriority.MEDIUM: 1,
    RecommendationPriority.LOW: 2,
}


# ─── Snapshots ───────────────────────────────────────────────────

@dataclass(frozen=True)
class ListSnapshot:
    id: ListId
    title: str
    position: int = 0


@dataclass(frozen=True)
class CardSnapshot:
    id: CardId
    list_id: ListId
    title: str
    description: str | None = None
    due_date: datetime | None = None
    position: int = 0

    @property
    def text(self) -> str:
        return card_text(self.title, self.description)


@dataclass(frozen=True)
class CardRef:
    id: CardId
    title: str


@dataclass(frozen=True)
class RecommendationAction:
    type: RecommendationActionType
    due_date: datetime | None = None
    target_list_id: ListId | None = None
    related_cards: tuple[CardRef, ...] = ()


@dataclass(frozen=True)
class Recommendation:
    """Derived, never persisted. id is "<prefix>-<card id>"."""
    id: str
    type: RecommendationType
    card: CardRef
    suggestion: str
    priority: RecommendationPriority
    action: RecommendationAction


@dataclass(frozen=True)
class DueDateSignal:
    days: int
    priority: RecommendationPriority


@dataclass(frozen=True)
class ListMoveSignal:
    target: ListSnapshot
    suggestion: str
    priority: RecommendationPriority


@dataclass
class _ScoredCard:
    card: CardSnapshot
    score: int = field(default=0)


# ─── Signals ─────────────────────────────────────────────────────

def analyze_due_date(text: str) -> DueDateSignal | None:
    """Return the first matching due-date tier for the text, if any."""
    for keywords, days, priority in DUE_DATE_TIERS:
        if matches_any(text, keywords):
            return DueDateSignal(days=days, priority=priority)
    return None


def due_date_text(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days == 7:
        return "next week"
    if days == 30:
        return "next month"
    return f"in {days} days"


def _find_list(
    lists: Sequence[ListSnapshot], markers: tuple[str, ...],
) -> ListSnapshot | None:
    for candidate in lists:
        if matches_any(candidate.title, markers):
            return candidate
    return None


def analyze_list_move(
    current: ListSnapshot, text: str, lists: Sequence[ListSnapshot],
) -> ListMoveSignal | None:
    """Suggest moving a card to an in-progress or completion list.

    lists must be in ascending position; the first list whose title carries
    a marker is the target. A target equal to the current list is ignored.
    """
    current_title = current.title.lower()

    if "in progress" not in current_title and matches_any(text, IN_PROGRESS_KEYWORDS):
        target = _find_list(lists, IN_PROGRESS_LIST_MARKERS)
        if target is not None and target.id != current.id:
            return ListMoveSignal(
                target=target,
                suggestion=(
                    f'Move to "{target.title}" - card mentions "started" or "in progress"'
                ),
                priority=RecommendationPriority.MEDIUM,
            )

    if "done" not in current_title and matches_any(text, DONE_KEYWORDS):
        target = _find_list(lists, DONE_LIST_MARKERS)
        if target is not None and target.id != current.id:
            return ListMoveSignal(
                target=target,
                suggestion=f'Move to "{target.title}" - card content suggests completion',
                priority=RecommendationPriority.HIGH,
            )

    return None


def rank_related_cards(
    card: CardSnapshot, cards: Sequence[CardSnapshot],
) -> list[CardRef]:
    """Top 3 other cards sharing extracted keywords with card."""
    keywords = extract_keywords(card.text)
    if not keywords:
        return []

    scored = []
    for other in cards:
        if other.id == card.id:
            continue
        other_text = other.text
        score = sum(1 for keyword in keywords if keyword in other_text)
        if score > 0:
            scored.append(_ScoredCard(card=other, score=score))

    scored.sort(key=lambda s: s.score, reverse=True)
    return [
        CardRef(id=s.card.id, title=s.card.title)
        for s in scored[:MAX_RELATED_CARDS]
    ]


def sort_by_priority(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Stable sort: high first, then medium, then low."""
    return sorted(recommendations, key=lambda r: _PRIORITY_ORDER[r.priority])


# ─── Board-level generation ──────────────────────────────────────

def _due_date_recommendation(
    card: CardSnapshot, ref: CardRef, now: datetime,
) -> Recommendation | None:
    if card.due_date is not None:
        return None
    signal = analyze_due_date(card.text)
    if signal is None:
        return None
    return Recommendation(
        id=f"due-{card.id}",
        type=RecommendationType.DUE_DATE,
        card=ref,
        suggestion=f'Set due date for "{card.title}" - {due_date_text(signal.days)}',
        priority=signal.priority,
        action=RecommendationAction(
            type=RecommendationActionType.SET_DUE_DATE,
            due_date=now + timedelta(days=signal.days),
        ),
    )


def _list_move_recommendation(
    card: CardSnapshot, ref: CardRef,
    current: ListSnapshot, lists: Sequence[ListSnapshot],
) -> Recommendation | None:
    if len(lists) < 2:
        return None
    signal = analyze_list_move(current, card.text, lists)
    if signal is None:
        return None
    return Recommendation(
        id=f"move-{card.id}",
        type=RecommendationType.LIST_MOVE,
        card=ref,
        suggestion=signal.suggestion,
        priority=signal.priority,
        action=RecommendationAction(
            type=RecommendationActionType.MOVE_CARD,
            target_list_id=signal.target.id,
        ),
    )


def _related_cards_recommendation(
    card: CardSnapshot, ref: CardRef, cards: Sequence[CardSnapshot],
) -> Recommendation | None:
    related = rank_related_cards(card, cards)
    if not related:
        return None
    plural = "s" if len(related) > 1 else ""
    return Recommendation(
        id=f"related-{card.id}",
        type=RecommendationType.RELATED_CARDS,
        card=ref,
        suggestion=f'"{card.title}" is related to {len(related)} other card{plural}',
        priority=RecommendationPriority.LOW,
        action=RecommendationAction(
            type=RecommendationActionType.SHOW_RELATED,
            related_cards=tuple(related),
        ),
    )


def build_recommendations(
    lists: Sequence[ListSnapshot],
    cards: Sequence[CardSnapshot],
    now: datetime,
) -> list[Recommendation]:
    """Run all signals over every card and return them sorted by priority.

    lists in ascending position, cards in board scan order. Cards whose list
    is not among lists are skipped.
    """
    lists_by_id = {board_list.id: board_list for board_list in lists}
    recommendations: list[Recommendation] = []

    for card in cards:
        current = lists_by_id.get(card.list_id)
        if current is None:
            continue
        ref = CardRef(id=card.id, title=card.title)

        for candidate in (
            _due_date_recommendation(card, ref, now),
            _list_move_recommendation(card, ref, current, lists),
            _related_cards_recommendation(card, ref, cards),
        ):
            if candidate is not None:
                recommendations.append(candidate)

    return sort_by_priority(recommendations)
