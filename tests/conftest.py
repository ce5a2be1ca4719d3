# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from campus_board.api.v1.dependencies import get_revalidator_dep
from campus_board.core.roles import Actor, Role
from campus_board.core.security import create_access_token
from campus_board.db.session import Base
from campus_board.db.session import get_db as app_get_session
from campus_board.main import app as fastapi_app
from campus_board.models import (
    Comment,
    CommentStatus,
    News,
    NewsStatus,
    Profile,
    Topic,
    TopicStatus,
)
from campus_board.services.revalidation import RecordingRevalidator

TEST_DB_URL = "sqlite://"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def revalidator() -> RecordingRevalidator:
    return RecordingRevalidator()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    revalidator: RecordingRevalidator,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_revalidator_dep] = lambda: revalidator
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_revalidator_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_profile(db: Session, role: Role, name: str) -> Profile:
    profile = Profile(display_name=name, email=f"{name.lower()}@campus.test", role=role)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture()
def admin_profile(db_session: Session) -> Profile:
    return _make_profile(db_session, Role.ADMIN, "Admin")


@pytest.fixture()
def mod_profile(db_session: Session) -> Profile:
    return _make_profile(db_session, Role.MOD, "Mod")


@pytest.fixture()
def member_profile(db_session: Session) -> Profile:
    return _make_profile(db_session, Role.MEMBER, "Member")


def as_actor(profile: Profile) -> Actor:
    return Actor(id=profile.id, role=profile.role, email=profile.email)


@pytest.fixture()
def admin(admin_profile: Profile) -> Actor:
    return as_actor(admin_profile)


@pytest.fixture()
def mod(mod_profile: Profile) -> Actor:
    return as_actor(mod_profile)


@pytest.fixture()
def member(member_profile: Profile) -> Actor:
    return as_actor(member_profile)


def _auth_headers(profile: Profile) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}


@pytest.fixture()
def admin_headers(admin_profile: Profile) -> dict[str, str]:
    return _auth_headers(admin_profile)


@pytest.fixture()
def mod_headers(mod_profile: Profile) -> dict[str, str]:
    return _auth_headers(mod_profile)


@pytest.fixture()
def member_headers(member_profile: Profile) -> dict[str, str]:
    return _auth_headers(member_profile)


@pytest.fixture()
def topic(db_session: Session, mod_profile: Profile) -> Topic:
    """An OPEN topic created by the moderator."""
    topic = Topic(
        title="Library opening hours",
        body="Should the library stay open later during exams?",
        status=TopicStatus.OPEN,
        author_id=mod_profile.id,
    )
    db_session.add(topic)
    db_session.commit()
    db_session.refresh(topic)
    return topic


@pytest.fixture()
def locked_topic(db_session: Session, mod_profile: Profile) -> Topic:
    topic = Topic(
        title="Closed thread",
        body="No more replies",
        status=TopicStatus.LOCKED,
        author_id=mod_profile.id,
    )
    db_session.add(topic)
    db_session.commit()
    db_session.refresh(topic)
    return topic


@pytest.fixture()
def published_news(db_session: Session, admin_profile: Profile) -> News:
    news = News(
        title="Sports day",
        body="Sports day moves to Friday.",
        status=NewsStatus.PUBLISHED,
        author_id=admin_profile.id,
    )
    db_session.add(news)
    db_session.commit()
    db_session.refresh(news)
    return news


@pytest.fixture()
def draft_news(db_session: Session, admin_profile: Profile) -> News:
    news = News(
        title="Unreleased",
        body="Not yet.",
        status=NewsStatus.DRAFT,
        author_id=admin_profile.id,
    )
    db_session.add(news)
    db_session.commit()
    db_session.refresh(news)
    return news


@pytest.fixture()
def pending_news(db_session: Session, member_profile: Profile) -> News:
    """A member submission waiting in the review queue."""
    news = News(
        title="Robotics club wins regional",
        body="The robotics club took first place.",
        status=NewsStatus.PENDING,
        author_id=member_profile.id,
    )
    db_session.add(news)
    db_session.commit()
    db_session.refresh(news)
    return news


@pytest.fixture()
def make_comment(
    db_session: Session,
    member_profile: Profile,
    topic: Topic,
) -> Callable[..., Comment]:
    """Insert a comment directly, bypassing the service rules."""

    def _make(
        body: str = "A comment",
        status: CommentStatus = CommentStatus.PENDING,
        author: Profile | None = None,
        topic_id: str | None = None,
        parent_id: int | None = None,
    ) -> Comment:
        comment = Comment(
            body=body,
            status=status,
            author_id=(author or member_profile).id,
            topic_id=topic_id or topic.id,
            parent_id=parent_id,
        )
        db_session.add(comment)
        db_session.commit()
        db_session.refresh(comment)
        return comment

    return _make
