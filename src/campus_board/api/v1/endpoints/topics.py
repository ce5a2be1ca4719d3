"""Topic endpoints.

Mutations follow the form-action contract and answer with
``{"success": ..., "error"?: ..., "message"?: ...}``.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from campus_board.core.errors import DomainError
from campus_board.models.topic import TopicStatus
from campus_board.schemas.comment import PostCommentForm
from campus_board.schemas.common import ActionResult, Pagination
from campus_board.schemas.topic import TopicCreate, TopicListResponse, TopicView
from campus_board.services import comments as comment_service
from campus_board.services import topics as topic_service
from campus_board.services.projections import topic_view

from ..dependencies import ActorDep, RevalidatorDep, SessionDep
from ..responses import action_failure

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=TopicListResponse)
async def list_topics(
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=topic_service.TOPIC_PAGE_MAX),
    status_filter: TopicStatus | None = Query(None, alias="status"),
    author_id: str | None = Query(None),
    search: str | None = Query(None, max_length=200),
) -> TopicListResponse:
    """List topics newest first with their approved-comment counts."""
    result = topic_service.list_topics(
        db,
        page=page,
        limit=limit,
        status=status_filter,
        author_id=author_id,
        search=search,
    )
    return TopicListResponse(
        data=[topic_view(topic, count) for topic, count in result.rows],
        pagination=Pagination.build(page, limit, result.total),
    )


@router.get("/{topic_id}", response_model=TopicView)
async def get_topic(topic_id: UUID, db: SessionDep) -> TopicView:
    """Get a single topic."""
    topic, count = topic_service.get_topic(db, str(topic_id))
    return topic_view(topic, count)


@router.post(
    "",
    response_model=ActionResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_topic(
    payload: TopicCreate,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Create an OPEN topic (MOD/ADMIN)."""
    try:
        topic_service.create_topic(
            db,
            actor,
            title=payload.title,
            body=payload.body,
            revalidator=revalidator,
        )
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Topic created")


@router.post(
    "/{topic_id}/lock",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def lock_topic(
    topic_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Lock a topic so it no longer accepts comments (MOD/ADMIN)."""
    try:
        topic_service.lock_topic(db, actor, str(topic_id), revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Topic locked")


@router.post(
    "/{topic_id}/unlock",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def unlock_topic(
    topic_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Re-open a locked topic (MOD/ADMIN)."""
    try:
        topic_service.unlock_topic(db, actor, str(topic_id), revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Topic unlocked")


@router.delete(
    "/{topic_id}",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def delete_topic(
    topic_id: UUID,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Delete a topic and all of its comments (MOD/ADMIN)."""
    try:
        topic_service.delete_topic(db, actor, str(topic_id), revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Topic deleted")


@router.post(
    "/{topic_id}/comments",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def post_comment(
    topic_id: UUID,
    payload: PostCommentForm,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Submit a comment on a topic; it waits for moderation."""
    try:
        comment_service.create_comment(
            db,
            actor,
            body=payload.body,
            topic_id=str(topic_id),
            revalidator=revalidator,
        )
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Submitted for review")
