"""ORM Models — SQLAlchemy declarative models for all board entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Board is the aggregate root; lists, cards, collaborations and invitations
      are removed with it (ON DELETE CASCADE)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from taskboard.models.user import User  # noqa: F401
from taskboard.models.board import Board  # noqa: F401
from taskboard.models.collaboration import Collaboration  # noqa: F401
from taskboard.models.board_list import BoardList  # noqa: F401
from taskboard.models.card import Card  # noqa: F401
from taskboard.models.invitation import Invitation  # noqa: F401
