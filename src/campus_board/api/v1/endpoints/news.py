"""News endpoints: the public feed, member submissions and editorial review.

Transitions follow the form-action contract and answer with
``{"success": ..., "error"?: ..., "message"?: ...}``.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from campus_board.core.errors import DomainError
from campus_board.models.news import NewsCategory, NewsStatus
from campus_board.schemas.common import ActionResult, Pagination
from campus_board.schemas.news import (
    NewsCreate,
    NewsCreated,
    NewsListResponse,
    NewsReviewRequest,
    NewsView,
)
from campus_board.services import news as news_service
from campus_board.services.projections import news_view

from ..dependencies import ActorDep, RevalidatorDep, SessionDep
from ..responses import action_failure

router = APIRouter(prefix="/news", tags=["news"])


@router.get("", response_model=NewsListResponse)
async def list_news(
    db: SessionDep,
    actor: ActorDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=news_service.NEWS_PAGE_MAX),
    status_filter: NewsStatus | None = Query(None, alias="status"),
    category: NewsCategory | None = Query(None),
) -> NewsListResponse:
    """List published news; other statuses (the review queue) need MOD/ADMIN."""
    result = news_service.list_news(
        db,
        actor,
        page=page,
        limit=limit,
        status=status_filter,
        category=category,
    )
    return NewsListResponse(
        data=[news_view(news) for news in result.rows],
        pagination=Pagination.build(page, limit, result.total),
    )


@router.get("/submissions", response_model=NewsListResponse)
async def my_submissions(
    db: SessionDep,
    actor: ActorDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=news_service.NEWS_PAGE_MAX),
) -> NewsListResponse:
    """The caller's own articles in every status."""
    result = news_service.list_submissions(db, actor, page=page, limit=limit)
    return NewsListResponse(
        data=[news_view(news) for news in result.rows],
        pagination=Pagination.build(page, limit, result.total),
    )


@router.get("/{news_id}", response_model=NewsView)
async def get_news(news_id: UUID, db: SessionDep, actor: ActorDep) -> NewsView:
    """Get a single article."""
    return news_view(news_service.get_news(db, actor, str(news_id)))


@router.post(
    "",
    response_model=NewsCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_news(
    payload: NewsCreate,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> NewsCreated | JSONResponse:
    """Write an article (MOD/ADMIN); published unless ``draft`` is set."""
    try:
        news = news_service.create_news(
            db,
            actor,
            title=payload.title,
            body=payload.body,
            summary=payload.summary,
            category=payload.category,
            draft=payload.draft,
            revalidator=revalidator,
        )
    except DomainError as exc:
        return action_failure(exc)
    message = "Draft saved" if payload.draft else "News published"
    return NewsCreated(data=news_view(news), message=message)


@router.post(
    "/submissions",
    response_model=NewsCreated,
    status_code=status.HTTP_201_CREATED,
)
async def save_submission(
    payload: NewsCreate,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> NewsCreated | JSONResponse:
    """Save a member submission as a DRAFT."""
    try:
        news = news_service.save_draft(
            db,
            actor,
            title=payload.title,
            body=payload.body,
            summary=payload.summary,
            category=payload.category,
            revalidator=revalidator,
        )
    except DomainError as exc:
        return action_failure(exc)
    return NewsCreated(data=news_view(news), message="Draft saved")


@router.post(
    "/{news_id}/submit",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def submit_news(
    news_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Send a draft to the review queue (author only)."""
    try:
        news_service.submit_news(db, actor, str(news_id), revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Submitted for review")


@router.post(
    "/{news_id}/rework",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def rework_news(
    news_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Return a rejected article to DRAFT (author only)."""
    try:
        news_service.rework_news(db, actor, str(news_id), revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Returned to draft")


@router.post(
    "/{news_id}/publish",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def publish_news(
    news_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Publish a draft directly (MOD/ADMIN)."""
    try:
        news_service.publish_news(db, actor, str(news_id), revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="News published")


@router.post(
    "/{news_id}/approve",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def approve_news(
    news_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
    payload: NewsReviewRequest | None = None,
) -> ActionResult | JSONResponse:
    """Approve a pending submission (MOD/ADMIN)."""
    try:
        news_service.approve_news(
            db,
            actor,
            str(news_id),
            note=payload.note if payload else None,
            revalidator=revalidator,
        )
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Submission approved")


@router.post(
    "/{news_id}/reject",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def reject_news(
    news_id: UUID,
    payload: NewsReviewRequest,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Reject a pending submission with a note (MOD/ADMIN)."""
    try:
        news_service.reject_news(
            db,
            actor,
            str(news_id),
            note=payload.note,
            revalidator=revalidator,
        )
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Submission rejected")
