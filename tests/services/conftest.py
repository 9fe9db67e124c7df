"""Service test fixtures — async DB, seed helpers and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - get_notifier overridden with a RecordingNotifier (no SMTP)
    - Seed helpers always commit, so request sessions see the rows

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for service and route tests
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from taskboard.api.auth import create_access_token
from taskboard.core.domain_types import InvitationStatus
from taskboard.db.base import Base
from taskboard.infrastructure.database import get_db, DatabaseSessionManager
from taskboard.infrastructure.notifier import get_notifier
import taskboard.infrastructure.database as db_module
from taskboard.main import app
from taskboard.models import (
    Board, BoardList, Card, Collaboration, Invitation, User,
)


class RecordingNotifier:
    """Collects invitation notifications; raises when fail is set."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    async def send_invitation(self, email: str, board_title: str, token: str) -> None:
        if self.fail:
            raise ConnectionRefusedError("smtp relay unreachable")
        self.sent.append({"email": email, "board_title": board_title, "token": token})


class Seeder:
    """Inserts committed rows for tests."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._card_positions: dict = {}

    async def user(self, email: str, name: str = "Test User") -> User:
        user = User(email=email, name=name)
        self.db.add(user)
        await self.db.commit()
        return user

    async def board(
        self, owner: User, title: str = "Launch plan",
        list_titles: tuple[str, ...] = ("To Do", "In Progress", "Done"),
    ) -> tuple[Board, list[BoardList]]:
        board = Board(title=title, owner_id=owner.id)
        self.db.add(board)
        await self.db.flush()
        lists = [
            BoardList(board_id=board.id, title=list_title, position=position)
            for position, list_title in enumerate(list_titles)
        ]
        self.db.add_all(lists)
        await self.db.commit()
        return board, lists

    async def card(
        self, board_list: BoardList, title: str,
        description: str | None = None, due_date: datetime | None = None,
    ) -> Card:
        position = self._card_positions.get(board_list.id, 0)
        self._card_positions[board_list.id] = position + 1
        card = Card(
            list_id=board_list.id, title=title, description=description,
            due_date=due_date, position=position,
        )
        self.db.add(card)
        await self.db.commit()
        return card

    async def collaborator(self, board: Board, user: User) -> Collaboration:
        collaboration = Collaboration(user_id=user.id, board_id=board.id)
        self.db.add(collaboration)
        await self.db.commit()
        return collaboration

    async def invitation(
        self, board: Board, inviter: User, email: str, token: str,
        expires_at: datetime | None = None,
        status: InvitationStatus = InvitationStatus.PENDING,
    ) -> Invitation:
        invitation = Invitation(
            board_id=board.id, email=email, invited_by=inviter.id, token=token,
            status=status.value,
            expires_at=expires_at or datetime.now(timezone.utc) + timedelta(days=7),
        )
        self.db.add(invitation)
        await self.db.commit()
        return invitation

    async def collaboration_count(self, board: Board) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Collaboration)
            .where(Collaboration.board_id == board.id),
        )
        return result.scalar_one()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def seed(test_db):
    return Seeder(test_db)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def owner(seed):
    return await seed.user("owner@example.com", "Olivia Owner")


@pytest.fixture
async def invitee(seed):
    return await seed.user("invitee@example.com", "Ivan Invitee")


@pytest.fixture
async def outsider(seed):
    return await seed.user("outsider@example.com", "Oscar Outsider")


@pytest.fixture
async def board_with_lists(seed, owner):
    return await seed.board(owner)


@pytest.fixture
async def client(test_engine, test_session_factory, notifier):
    """FastAPI test client with DB and notifier dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def auth():
    """Returns a callable producing Authorization headers for a user."""
    return auth_headers
