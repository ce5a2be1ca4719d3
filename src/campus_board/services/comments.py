"""Comment lifecycle and moderation.

Comments are created PENDING and moved once, by a MOD or ADMIN, to APPROVED
or REJECTED. The PENDING precondition is enforced by a conditional update
(``... WHERE status = 'PENDING'``) whose row count is checked, so two
moderators racing on the same comment cannot both succeed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from campus_board.core.errors import (
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from campus_board.core.roles import (
    CAN_COMMENT,
    CAN_MODERATE,
    Actor,
    check_permission,
    require_role,
)
from campus_board.db.session import commit_or_raise
from campus_board.models import (
    AuditAction,
    Comment,
    CommentStatus,
    News,
    NewsStatus,
    Topic,
    TopicStatus,
)
from campus_board.models.comment import MODERATION_TARGETS
from campus_board.models.mixins import utcnow
from campus_board.schemas.comment import BATCH_MAX_SIZE, REASON_MAX_LENGTH
from campus_board.services.audit import record_action
from campus_board.services.revalidation import (
    ADMIN_COMMENTS_PAGE,
    TOPICS_PAGE,
    Revalidator,
)

logger = logging.getLogger(__name__)

COMMENT_PAGE_MAX = 100

ONLY_PENDING = "Only pending comments can be moderated"


@dataclass(frozen=True)
class CommentPage:
    """Top-level comments for one page plus the reply visibility rule."""

    rows: list[Comment]
    total: int
    can_see_all: bool
    viewer_id: str | None

    def is_visible(self, comment: Comment) -> bool:
        if self.can_see_all:
            return True
        return comment.status == CommentStatus.APPROVED or (
            self.viewer_id is not None and comment.author_id == self.viewer_id
        )


def _moderation_target(target: CommentStatus | str) -> CommentStatus:
    try:
        status = CommentStatus(target)
    except ValueError:
        status = None
    if status not in MODERATION_TARGETS:
        raise ValidationFailedError(
            "Status must be APPROVED or REJECTED",
            details=[{"loc": ["status"], "msg": f"Unsupported status {target!r}"}],
        )
    return status


def _check_reason(reason: str | None) -> None:
    if reason is not None and len(reason) > REASON_MAX_LENGTH:
        raise ValidationFailedError(
            f"Reason cannot exceed {REASON_MAX_LENGTH} characters",
            details=[{"loc": ["reason"], "msg": "Too long"}],
        )


def _invalidation_paths(comments: Iterable[Comment], status: CommentStatus | None) -> list[str]:
    paths = [comment.thread_path for comment in comments]
    paths.append(ADMIN_COMMENTS_PAGE)
    # Approved comments change the public counters on the topic list.
    if status is None or status == CommentStatus.APPROVED:
        paths.append(TOPICS_PAGE)
    return paths


def create_comment(
    db: Session,
    actor: Actor | None,
    *,
    body: str,
    topic_id: str | None = None,
    news_id: str | None = None,
    parent_id: int | None = None,
    revalidator: Revalidator,
) -> Comment:
    """Create a PENDING comment or reply on an open topic or published news item.

    Raises:
        UnauthenticatedError: No actor.
        ValidationFailedError: No target, two targets, or a reply across targets.
        NotFoundError: Topic, news item or parent comment missing.
        InvalidStateError: Topic locked or news item unpublished.
    """
    actor = require_role(actor, CAN_COMMENT)
    if (topic_id is None) == (news_id is None):
        raise ValidationFailedError("Exactly one of topic_id or news_id is required")

    if topic_id is not None:
        topic = db.get(Topic, topic_id)
        if topic is None:
            raise NotFoundError("Topic not found")
        if topic.status != TopicStatus.OPEN:
            raise InvalidStateError("Topic is locked and does not accept comments")
    else:
        news = db.get(News, news_id)
        if news is None:
            raise NotFoundError("News item not found")
        if news.status != NewsStatus.PUBLISHED:
            raise InvalidStateError("News item does not accept comments")

    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None:
            raise NotFoundError("Parent comment not found")
        if parent.topic_id != topic_id or parent.news_id != news_id:
            raise ValidationFailedError(
                "Reply must belong to the same topic or news item",
                details=[{"loc": ["parent_id"], "msg": "Parent is attached elsewhere"}],
            )

    # Authors can never self-approve, whatever their role.
    comment = Comment(
        body=body,
        topic_id=topic_id,
        news_id=news_id,
        parent_id=parent_id,
        author_id=actor.id,
        status=CommentStatus.PENDING,
    )
    db.add(comment)
    commit_or_raise(db, "create_comment")
    db.refresh(comment)
    revalidator.revalidate([comment.thread_path, ADMIN_COMMENTS_PAGE])
    return comment


def moderate_comment(
    db: Session,
    actor: Actor | None,
    comment_id: int,
    target: CommentStatus | str,
    *,
    reason: str | None = None,
    revalidator: Revalidator,
) -> Comment:
    """Move one PENDING comment to APPROVED or REJECTED."""
    actor = require_role(actor, CAN_MODERATE)
    status = _moderation_target(target)
    _check_reason(reason)

    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.status != CommentStatus.PENDING:
        raise InvalidStateError(ONLY_PENDING)

    result = db.execute(
        update(Comment)
        .where(Comment.id == comment_id, Comment.status == CommentStatus.PENDING)
        .values(
            status=status,
            moderated_by=actor.id,
            moderated_at=utcnow(),
            reason=reason,
        )
    )
    if result.rowcount != 1:
        # Moderated by someone else between the read and the write.
        logger.info("Lost moderation race on comment %s", comment_id)
        db.rollback()
        raise InvalidStateError(ONLY_PENDING)

    record_action(
        db,
        actor,
        AuditAction.MODERATE,
        "comment",
        [comment_id],
        status=status,
        reason=reason,
    )
    commit_or_raise(db, "moderate_comment")
    db.refresh(comment)
    revalidator.revalidate(_invalidation_paths([comment], status))
    return comment


def batch_moderate(
    db: Session,
    actor: Actor | None,
    comment_ids: Iterable[int],
    target: CommentStatus | str,
    *,
    reason: str | None = None,
    revalidator: Revalidator,
) -> int:
    """Apply one target status to a set of PENDING comments, all or nothing.

    Every id must exist and be PENDING. The write is a single guarded bulk
    update; if it matches fewer rows than requested the transaction is rolled
    back and nothing changes. All comments share one ``moderated_at``.

    Returns:
        Number of comments moderated.
    """
    actor = require_role(actor, CAN_MODERATE)
    status = _moderation_target(target)
    _check_reason(reason)

    ids = list(dict.fromkeys(comment_ids))
    if not 1 <= len(ids) <= BATCH_MAX_SIZE:
        raise ValidationFailedError(
            f"Select between 1 and {BATCH_MAX_SIZE} comments",
            details=[{"loc": ["comment_ids"], "msg": f"Got {len(ids)} ids"}],
        )

    comments = db.query(Comment).filter(Comment.id.in_(ids)).all()
    if len(comments) != len(ids):
        found = {comment.id for comment in comments}
        missing = [comment_id for comment_id in ids if comment_id not in found]
        raise NotFoundError("Some comments do not exist", details=[{"missing_ids": missing}])

    not_pending = [c.id for c in comments if c.status != CommentStatus.PENDING]
    if not_pending:
        raise InvalidStateError(ONLY_PENDING, details=[{"comment_ids": sorted(not_pending)}])

    result = db.execute(
        update(Comment)
        .where(Comment.id.in_(ids), Comment.status == CommentStatus.PENDING)
        .values(
            status=status,
            moderated_by=actor.id,
            moderated_at=utcnow(),
            reason=reason,
        )
    )
    if result.rowcount != len(ids):
        logger.info("Batch moderation matched %s of %s comments", result.rowcount, len(ids))
        db.rollback()
        raise InvalidStateError(ONLY_PENDING)

    record_action(
        db,
        actor,
        AuditAction.BATCH_MODERATE,
        "comment",
        ids,
        status=status,
        reason=reason,
    )
    commit_or_raise(db, "batch_moderate")
    revalidator.revalidate(_invalidation_paths(comments, status))
    return len(ids)


def _descendant_ids(db: Session, root_id: int) -> list[int]:
    collected = [root_id]
    frontier = [root_id]
    while frontier:
        children = [
            row[0]
            for row in db.query(Comment.id).filter(Comment.parent_id.in_(frontier)).all()
        ]
        frontier = [child for child in children if child not in collected]
        collected.extend(frontier)
    return collected


def delete_comment(
    db: Session,
    actor: Actor | None,
    comment_id: int,
    *,
    revalidator: Revalidator,
) -> int:
    """Delete a comment in any status, together with its replies.

    Returns:
        Number of rows removed.
    """
    actor = require_role(actor, CAN_MODERATE)
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    thread_path = comment.thread_path

    ids = _descendant_ids(db, comment_id)
    removed = (
        db.query(Comment)
        .filter(Comment.id.in_(ids))
        .delete(synchronize_session="fetch")
    )
    record_action(db, actor, AuditAction.DELETE_COMMENT, "comment", ids)
    commit_or_raise(db, "delete_comment")
    revalidator.revalidate([thread_path, ADMIN_COMMENTS_PAGE, TOPICS_PAGE])
    return removed


def list_comments(
    db: Session,
    actor: Actor | None,
    *,
    page: int = 1,
    limit: int = 20,
    topic_id: str | None = None,
    news_id: str | None = None,
    author_id: str | None = None,
    status: CommentStatus | None = None,
) -> CommentPage:
    """Return top-level comments newest first.

    Moderators see every status; everyone else sees approved comments plus
    their own.
    """
    limit = max(1, min(limit, COMMENT_PAGE_MAX))
    page = max(1, page)
    can_see_all = actor is not None and check_permission(actor.role, CAN_MODERATE)
    viewer_id = actor.id if actor is not None else None

    query = db.query(Comment).filter(Comment.parent_id.is_(None))
    if topic_id is not None:
        query = query.filter(Comment.topic_id == topic_id)
    if news_id is not None:
        query = query.filter(Comment.news_id == news_id)
    if author_id is not None:
        query = query.filter(Comment.author_id == author_id)
    if status is not None:
        query = query.filter(Comment.status == status)
    if not can_see_all:
        visible = Comment.status == CommentStatus.APPROVED
        if viewer_id is not None:
            visible = or_(visible, Comment.author_id == viewer_id)
        query = query.filter(visible)

    total = query.count()
    rows = (
        query.order_by(Comment.created_at.desc(), Comment.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return CommentPage(rows=rows, total=total, can_see_all=can_see_all, viewer_id=viewer_id)
