"""Invitation Rules — pure lifecycle checks for the invitation state machine.

    (none) --issue--> pending --accept--> accepted
                         |
                         +-- expires_at passed --> expired-on-read

Invariants:
    - Expiry is derived at read time (now > expires_at); status is never set to "expired"
    - Acceptance checks run in fixed order: email, expiry, already-accepted
    - Email comparison ignores case and surrounding whitespace; users.email is
      unique on lower(email), so at most one account matches an invitation
    - Naive datetimes (SQLite round-trips) are interpreted as UTC

Design Decisions:
    - Email checked before expiry: a wrong bearer always receives EmailMismatch,
      whatever the invitation's state
"""

from datetime import datetime, timedelta, timezone

from taskboard.core.domain_types import InvitationStatus
from taskboard.core.errors import (
    EmailMismatchError,
    ErrorContext,
    InvitationAlreadyAcceptedError,
    InvitationExpiredError,
)
from taskboard.core.repository_protocols import InvitationLike


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def compute_expiry(now: datetime, ttl_days: int) -> datetime:
    return as_utc(now) + timedelta(days=ttl_days)


def is_expired(expires_at: datetime, now: datetime) -> bool:
    return as_utc(now) > as_utc(expires_at)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def emails_match(invited: str, presented: str) -> bool:
    return normalize_email(invited) == normalize_email(presented)


def _context(invitation: InvitationLike) -> ErrorContext:
    return ErrorContext(
        board_id=str(invitation.board_id), invitation_id=str(invitation.id),
    )


def check_resolvable(invitation: InvitationLike, now: datetime) -> None:
    """Raise InvitationExpiredError when the invitation is past its window."""
    if is_expired(invitation.expires_at, now):
        raise InvitationExpiredError(context=_context(invitation))


def check_acceptable(
    invitation: InvitationLike, principal_email: str, now: datetime,
) -> None:
    """Validate acceptance preconditions, raising the first failure."""
    if not emails_match(invitation.email, principal_email):
        raise EmailMismatchError(context=_context(invitation))
    check_resolvable(invitation, now)
    if invitation.status == InvitationStatus.ACCEPTED.value:
        raise InvitationAlreadyAcceptedError(context=_context(invitation))
