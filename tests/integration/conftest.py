"""Integration test fixtures for database and HTTP client operations.

Each test gets a fresh in-memory SQLite database with every table created.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from src.scribe.api.dependencies import get_db_session
from src.scribe.core.config import Settings
from src.scribe.core.db import get_session, init_models
from src.scribe.core.security import TokenService
from src.scribe.main import create_app
from src.scribe.models import MemberRole, User, Workspace, WorkspaceMember
from src.scribe.repositories import UserRepository, WorkspaceMemberRepository, WorkspaceRepository
from src.scribe.services import IdentityService, OnboardingService, UserService, WorkspaceService
from tests.factories import UserFactory, WorkspaceFactory, WorkspaceMemberFactory
from tests.helpers import RecordingMailer


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database shared by every connection of the test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for database operations.

    The session does not auto-commit. Fixtures that seed data commit explicitly.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def mailer(settings: Settings) -> RecordingMailer:
    return RecordingMailer(settings)


@pytest.fixture
def user_repo(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def workspace_repo(db_session: AsyncSession) -> WorkspaceRepository:
    return WorkspaceRepository(db_session)


@pytest.fixture
def member_repo(db_session: AsyncSession) -> WorkspaceMemberRepository:
    return WorkspaceMemberRepository(db_session)


@pytest.fixture
def identity_service(
    user_repo: UserRepository,
    member_repo: WorkspaceMemberRepository,
    db_session: AsyncSession,
    token_service: TokenService,
    mailer: RecordingMailer,
) -> IdentityService:
    return IdentityService(user_repo, member_repo, db_session, token_service, mailer)


@pytest.fixture
def workspace_service(
    workspace_repo: WorkspaceRepository,
    member_repo: WorkspaceMemberRepository,
    user_repo: UserRepository,
    db_session: AsyncSession,
    token_service: TokenService,
    mailer: RecordingMailer,
) -> WorkspaceService:
    return WorkspaceService(
        workspace_repo, member_repo, user_repo, db_session, token_service, mailer
    )


@pytest.fixture
def onboarding_service(
    user_repo: UserRepository,
    workspace_repo: WorkspaceRepository,
    member_repo: WorkspaceMemberRepository,
    db_session: AsyncSession,
) -> OnboardingService:
    return OnboardingService(user_repo, workspace_repo, member_repo, db_session)


@pytest.fixture
def user_service(user_repo: UserRepository, db_session: AsyncSession) -> UserService:
    return UserService(user_repo, db_session)


UserMaker = Callable[..., Coroutine[Any, Any, User]]


@pytest.fixture
def make_user(db_session: AsyncSession) -> UserMaker:
    """Persist a user built by UserFactory; kwargs override factory fields."""

    async def _make(**kwargs: Any) -> User:
        user = UserFactory.build(**kwargs)
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
async def team(db_session: AsyncSession, make_user: UserMaker) -> dict[str, Any]:
    """A team workspace with an owner and one accepted member per role.

    Also includes an outsider with no entry and a user whose invite is pending.
    """
    owner = await make_user(email="owner@example.com", first_name="Olive")
    admin = await make_user(email="admin@example.com")
    writer = await make_user(email="writer@example.com")
    viewer = await make_user(email="viewer@example.com")
    pending = await make_user(email="pending@example.com")
    outsider = await make_user(email="outsider@example.com")

    workspace = WorkspaceFactory.build(owner_id=owner.id, name="Acme Content")
    db_session.add(workspace)
    await db_session.flush()

    members: list[WorkspaceMember] = [
        WorkspaceMemberFactory.build(
            workspace_id=workspace.id,
            user_id=owner.id,
            email=owner.email,
            role=MemberRole.ADMIN.value,
        )
    ]
    for user, role in (
        (admin, MemberRole.ADMIN),
        (writer, MemberRole.WRITER),
        (viewer, MemberRole.VIEWER),
    ):
        members.append(
            WorkspaceMemberFactory.build(
                workspace_id=workspace.id,
                user_id=user.id,
                email=user.email,
                role=role.value,
                invited_by_user_id=owner.id,
            )
        )
    members.append(
        WorkspaceMemberFactory.pending(
            token="pending-invite-token",
            workspace_id=workspace.id,
            user_id=pending.id,
            email=pending.email,
            invited_by_user_id=owner.id,
        )
    )
    db_session.add_all(members)
    await db_session.commit()

    return {
        "workspace": workspace,
        "owner": owner,
        "admin": admin,
        "writer": writer,
        "viewer": viewer,
        "pending": pending,
        "outsider": outsider,
    }


@pytest.fixture
async def individual_workspace(db_session: AsyncSession, make_user: UserMaker) -> Workspace:
    owner = await make_user(email="solo@example.com")
    workspace = WorkspaceFactory.individual(owner_id=owner.id, name="Solo")
    db_session.add(workspace)
    await db_session.commit()
    return workspace


@pytest.fixture
def app(engine: AsyncEngine, mailer: RecordingMailer) -> FastAPI:
    """Application wired to the test database and the recording mailer."""
    app = create_app()

    async def _get_test_session() -> AsyncGenerator[AsyncSession, None]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    app.state.mailer = mailer
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
