"""News articles and their editorial review.

Moderators write articles directly, published or as a DRAFT. Members submit
articles for review: DRAFT -> PENDING, after which a MOD or ADMIN approves
(PUBLISHED) or rejects (REJECTED, with a note) them. A rejected article can be
taken back to DRAFT by its author. Every transition is a conditional update on
the expected current status, so two reviewers cannot both act on one article.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from campus_board.core.errors import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationFailedError,
)
from campus_board.core.roles import (
    CAN_COMMENT,
    CAN_MODERATE,
    CAN_PUBLISH_NEWS,
    Actor,
    check_permission,
    require_role,
)
from campus_board.db.session import commit_or_raise
from campus_board.models import AuditAction, News, NewsCategory, NewsStatus
from campus_board.models.mixins import utcnow
from campus_board.schemas.news import REVIEW_NOTE_MAX_LENGTH
from campus_board.services.audit import record_action
from campus_board.services.revalidation import (
    ADMIN_REVIEW_PAGE,
    MY_SUBMISSIONS_PAGE,
    NEWS_PAGE,
    Revalidator,
    news_page,
)

logger = logging.getLogger(__name__)

NEWS_PAGE_MAX = 50


@dataclass(frozen=True)
class NewsPage:
    rows: list[News]
    total: int


def _load_news(db: Session, news_id: str) -> News:
    news = db.get(News, news_id)
    if news is None:
        raise NotFoundError("News item not found")
    return news


def _is_reviewer(actor: Actor | None) -> bool:
    return actor is not None and check_permission(actor.role, CAN_MODERATE)


def _check_note(note: str | None, *, required: bool = False) -> str | None:
    if note is not None:
        note = note.strip() or None
    if required and note is None:
        raise ValidationFailedError(
            "A review note is required when rejecting",
            details=[{"loc": ["note"], "msg": "Required"}],
        )
    if note is not None and len(note) > REVIEW_NOTE_MAX_LENGTH:
        raise ValidationFailedError(
            f"Review note cannot exceed {REVIEW_NOTE_MAX_LENGTH} characters",
            details=[{"loc": ["note"], "msg": "Too long"}],
        )
    return note


def _transition(
    db: Session,
    news: News,
    expected: NewsStatus,
    values: dict[str, Any],
    message: str,
) -> None:
    """Apply ``values`` iff the article is still in ``expected`` status."""
    if news.status != expected:
        raise InvalidStateError(message)
    result = db.execute(
        update(News)
        .where(News.id == news.id, News.status == expected)
        .values(**values)
    )
    if result.rowcount != 1:
        logger.info("Lost news transition race on %s (expected %s)", news.id, expected)
        db.rollback()
        raise InvalidStateError(message)


def _require_author(actor: Actor | None, news: News) -> Actor:
    actor = require_role(actor, CAN_COMMENT)
    if news.author_id != actor.id:
        raise ForbiddenError("Only the author can change this submission")
    return actor


def create_news(
    db: Session,
    actor: Actor | None,
    *,
    title: str,
    body: str,
    summary: str | None = None,
    category: NewsCategory = NewsCategory.CAMPUS,
    draft: bool = False,
    revalidator: Revalidator,
) -> News:
    """Write an article as a MOD or ADMIN, published immediately unless ``draft``."""
    actor = require_role(actor, CAN_PUBLISH_NEWS)
    status = NewsStatus.DRAFT if draft else NewsStatus.PUBLISHED
    news = News(
        title=title,
        body=body,
        summary=summary,
        category=category,
        status=status,
        author_id=actor.id,
        published_at=None if draft else utcnow(),
    )
    db.add(news)
    db.flush()
    record_action(db, actor, AuditAction.CREATE_NEWS, "news", [news.id], status=status)
    commit_or_raise(db, "create_news")
    db.refresh(news)
    if status == NewsStatus.PUBLISHED:
        revalidator.revalidate([NEWS_PAGE, news_page(news.id)])
    return news


def save_draft(
    db: Session,
    actor: Actor | None,
    *,
    title: str,
    body: str,
    summary: str | None = None,
    category: NewsCategory = NewsCategory.CAMPUS,
    revalidator: Revalidator,
) -> News:
    """Start a submission: a DRAFT owned by ``actor``."""
    actor = require_role(actor, CAN_COMMENT)
    news = News(
        title=title,
        body=body,
        summary=summary,
        category=category,
        status=NewsStatus.DRAFT,
        author_id=actor.id,
    )
    db.add(news)
    commit_or_raise(db, "save_news_draft")
    db.refresh(news)
    revalidator.revalidate([MY_SUBMISSIONS_PAGE])
    return news


def submit_news(
    db: Session,
    actor: Actor | None,
    news_id: str,
    *,
    revalidator: Revalidator,
) -> News:
    """Send the author's DRAFT to the review queue."""
    news = _load_news(db, news_id)
    _require_author(actor, news)
    _transition(
        db,
        news,
        NewsStatus.DRAFT,
        {"status": NewsStatus.PENDING},
        "Only drafts can be submitted for review",
    )
    commit_or_raise(db, "submit_news")
    db.refresh(news)
    revalidator.revalidate([MY_SUBMISSIONS_PAGE, ADMIN_REVIEW_PAGE])
    return news


def rework_news(
    db: Session,
    actor: Actor | None,
    news_id: str,
    *,
    revalidator: Revalidator,
) -> News:
    """Take the author's REJECTED article back to DRAFT."""
    news = _load_news(db, news_id)
    _require_author(actor, news)
    _transition(
        db,
        news,
        NewsStatus.REJECTED,
        {"status": NewsStatus.DRAFT},
        "Only rejected articles can be reworked",
    )
    commit_or_raise(db, "rework_news")
    db.refresh(news)
    revalidator.revalidate([MY_SUBMISSIONS_PAGE])
    return news


def publish_news(
    db: Session,
    actor: Actor | None,
    news_id: str,
    *,
    revalidator: Revalidator,
) -> News:
    """Publish a DRAFT directly (MOD/ADMIN)."""
    actor = require_role(actor, CAN_PUBLISH_NEWS)
    news = _load_news(db, news_id)
    _transition(
        db,
        news,
        NewsStatus.DRAFT,
        {"status": NewsStatus.PUBLISHED, "published_at": utcnow()},
        "Only drafts can be published",
    )
    record_action(
        db, actor, AuditAction.PUBLISH_NEWS, "news", [news.id], status=NewsStatus.PUBLISHED
    )
    commit_or_raise(db, "publish_news")
    db.refresh(news)
    revalidator.revalidate([NEWS_PAGE, news_page(news.id), MY_SUBMISSIONS_PAGE])
    return news


def _review(
    db: Session,
    actor: Actor | None,
    news_id: str,
    status: NewsStatus,
    note: str | None,
    revalidator: Revalidator,
) -> News:
    actor = require_role(actor, CAN_MODERATE)
    note = _check_note(note, required=status == NewsStatus.REJECTED)
    news = _load_news(db, news_id)
    now = utcnow()
    values: dict[str, Any] = {
        "status": status,
        "reviewed_by": actor.id,
        "reviewed_at": now,
        "review_note": note,
    }
    if status == NewsStatus.PUBLISHED:
        values["published_at"] = now
    _transition(db, news, NewsStatus.PENDING, values, "Only pending submissions can be reviewed")

    action = AuditAction.APPROVE_NEWS if status == NewsStatus.PUBLISHED else AuditAction.REJECT_NEWS
    record_action(db, actor, action, "news", [news.id], status=status, reason=note)
    commit_or_raise(db, action.lower())
    db.refresh(news)

    paths = [ADMIN_REVIEW_PAGE, MY_SUBMISSIONS_PAGE]
    if status == NewsStatus.PUBLISHED:
        paths += [NEWS_PAGE, news_page(news.id)]
    revalidator.revalidate(paths)
    return news


def approve_news(
    db: Session,
    actor: Actor | None,
    news_id: str,
    *,
    note: str | None = None,
    revalidator: Revalidator,
) -> News:
    """Publish a PENDING submission, optionally with a note to the author."""
    return _review(db, actor, news_id, NewsStatus.PUBLISHED, note, revalidator)


def reject_news(
    db: Session,
    actor: Actor | None,
    news_id: str,
    *,
    note: str | None,
    revalidator: Revalidator,
) -> News:
    """Reject a PENDING submission. The note is mandatory."""
    return _review(db, actor, news_id, NewsStatus.REJECTED, note, revalidator)


def get_news(db: Session, actor: Actor | None, news_id: str) -> News:
    """Return an article; unpublished ones only to their author and reviewers."""
    news = _load_news(db, news_id)
    if news.status == NewsStatus.PUBLISHED:
        return news
    if actor is not None and (actor.id == news.author_id or _is_reviewer(actor)):
        return news
    raise NotFoundError("News item not found")


def _paginate(query: Any, order: Iterable[Any], page: int, limit: int) -> NewsPage:
    limit = max(1, min(limit, NEWS_PAGE_MAX))
    page = max(1, page)
    total = query.count()
    rows = query.order_by(*order).offset((page - 1) * limit).limit(limit).all()
    return NewsPage(rows=rows, total=total)


def list_news(
    db: Session,
    actor: Actor | None,
    *,
    page: int = 1,
    limit: int = 10,
    status: NewsStatus | None = None,
    category: NewsCategory | None = None,
) -> NewsPage:
    """List articles in one status, PUBLISHED by default.

    Other statuses are visible to reviewers only. The PENDING queue is
    oldest first; every other listing is newest first.
    """
    status = status or NewsStatus.PUBLISHED
    if status != NewsStatus.PUBLISHED:
        require_role(actor, CAN_MODERATE)

    query = db.query(News).filter(News.status == status)
    if category is not None:
        query = query.filter(News.category == category)

    if status == NewsStatus.PENDING:
        order = [News.created_at.asc(), News.id.asc()]
    elif status == NewsStatus.PUBLISHED:
        order = [News.published_at.desc(), News.id.desc()]
    else:
        order = [News.created_at.desc(), News.id.desc()]
    return _paginate(query, order, page, limit)


def list_submissions(
    db: Session,
    actor: Actor | None,
    *,
    page: int = 1,
    limit: int = 10,
) -> NewsPage:
    """The actor's own articles in every status, newest first."""
    actor = require_role(actor, CAN_COMMENT)
    query = db.query(News).filter(News.author_id == actor.id)
    return _paginate(query, [News.created_at.desc(), News.id.desc()], page, limit)
