"""Topic lifecycle: creation, lock/unlock and deletion.

Every mutation requires a MOD or ADMIN actor, is recorded in the audit trail
and, once committed, invalidates the topic list, the admin topic page and the
topic's own page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from campus_board.core.errors import NotFoundError
from campus_board.core.roles import CAN_MANAGE_TOPICS, Actor, require_role
from campus_board.db.session import commit_or_raise
from campus_board.models import AuditAction, Comment, CommentStatus, Topic, TopicStatus
from campus_board.services.audit import record_action
from campus_board.services.revalidation import Revalidator, topic_transition_paths

logger = logging.getLogger(__name__)

TOPIC_PAGE_MAX = 50


@dataclass(frozen=True)
class TopicPage:
    """One page of topics with their approved-comment counts."""

    rows: list[tuple[Topic, int]]
    total: int


def _load_topic(db: Session, topic_id: str) -> Topic:
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError("Topic not found")
    return topic


def create_topic(
    db: Session,
    actor: Actor | None,
    *,
    title: str,
    body: str,
    revalidator: Revalidator,
) -> Topic:
    """Create an OPEN topic authored by ``actor``."""
    actor = require_role(actor, CAN_MANAGE_TOPICS)
    topic = Topic(title=title, body=body, status=TopicStatus.OPEN, author_id=actor.id)
    db.add(topic)
    db.flush()
    record_action(db, actor, AuditAction.CREATE_TOPIC, "topic", [topic.id])
    commit_or_raise(db, "create_topic")
    db.refresh(topic)
    revalidator.revalidate(topic_transition_paths(topic.id))
    return topic


def _set_status(
    db: Session,
    actor: Actor | None,
    topic_id: str,
    status: TopicStatus,
    action: AuditAction,
    revalidator: Revalidator,
) -> Topic:
    actor = require_role(actor, CAN_MANAGE_TOPICS)
    topic = _load_topic(db, topic_id)
    # Written unconditionally: locking a locked topic is a no-op in effect.
    topic.status = status
    record_action(db, actor, action, "topic", [topic.id], status=status)
    commit_or_raise(db, action.lower())
    revalidator.revalidate(topic_transition_paths(topic.id))
    return topic


def lock_topic(
    db: Session,
    actor: Actor | None,
    topic_id: str,
    *,
    revalidator: Revalidator,
) -> Topic:
    """Stop new comments on a topic."""
    return _set_status(db, actor, topic_id, TopicStatus.LOCKED, AuditAction.LOCK_TOPIC, revalidator)


def unlock_topic(
    db: Session,
    actor: Actor | None,
    topic_id: str,
    *,
    revalidator: Revalidator,
) -> Topic:
    """Re-open a locked topic."""
    return _set_status(db, actor, topic_id, TopicStatus.OPEN, AuditAction.UNLOCK_TOPIC, revalidator)


def delete_topic(
    db: Session,
    actor: Actor | None,
    topic_id: str,
    *,
    revalidator: Revalidator,
) -> int:
    """Delete a topic in any state together with all of its comments.

    Returns:
        Number of comments removed with the topic.
    """
    actor = require_role(actor, CAN_MANAGE_TOPICS)
    topic = _load_topic(db, topic_id)
    # Delete comments explicitly; not every backend enforces ON DELETE CASCADE.
    removed = (
        db.query(Comment)
        .filter(Comment.topic_id == topic.id)
        .delete(synchronize_session="fetch")
    )
    db.delete(topic)
    record_action(db, actor, AuditAction.DELETE_TOPIC, "topic", [topic_id])
    commit_or_raise(db, "delete_topic")
    logger.info("Deleted topic %s with %d comments", topic_id, removed)
    revalidator.revalidate(topic_transition_paths(topic_id))
    return removed


def get_topic(db: Session, topic_id: str) -> tuple[Topic, int]:
    """Return a topic and its approved-comment count."""
    topic = _load_topic(db, topic_id)
    count = (
        db.query(func.count(Comment.id))
        .filter(Comment.topic_id == topic.id, Comment.status == CommentStatus.APPROVED)
        .scalar()
        or 0
    )
    return topic, int(count)


def list_topics(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    status: TopicStatus | None = None,
    author_id: str | None = None,
    search: str | None = None,
) -> TopicPage:
    """Return topics newest first with approved-comment counts."""
    limit = max(1, min(limit, TOPIC_PAGE_MAX))
    page = max(1, page)

    query = db.query(Topic)
    if status is not None:
        query = query.filter(Topic.status == status)
    if author_id is not None:
        query = query.filter(Topic.author_id == author_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Topic.title.ilike(pattern), Topic.body.ilike(pattern)))

    total = query.count()
    topics = (
        query.order_by(Topic.created_at.desc(), Topic.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    counts: dict[str, int] = {}
    if topics:
        counts = dict(
            db.query(Comment.topic_id, func.count(Comment.id))
            .filter(
                Comment.topic_id.in_([topic.id for topic in topics]),
                Comment.status == CommentStatus.APPROVED,
            )
            .group_by(Comment.topic_id)
            .all()
        )
    return TopicPage(rows=[(topic, int(counts.get(topic.id, 0))) for topic in topics], total=total)
