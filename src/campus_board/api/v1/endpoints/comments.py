"""Comment endpoints, including the moderation entry point."""

from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import APIRouter, Path, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from campus_board.core.errors import DomainError, ValidationFailedError
from campus_board.core.roles import CAN_MODERATE, require_role
from campus_board.models.comment import CommentStatus
from campus_board.schemas.comment import (
    COMMENT_ID_MAX,
    BatchModerateRequest,
    BatchModerateResponse,
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    ModerateCommentRequest,
)
from campus_board.schemas.common import ActionResult, Pagination
from campus_board.services import comments as comment_service
from campus_board.services.projections import comment_view

from ..dependencies import ActorDep, RevalidatorDep, SessionDep
from ..responses import action_failure, validation_failed

router = APIRouter(prefix="/comments", tags=["comments"])

_VERB = {"APPROVED": "approved", "REJECTED": "rejected"}


@router.get("", response_model=CommentListResponse)
async def list_comments(
    db: SessionDep,
    actor: ActorDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=comment_service.COMMENT_PAGE_MAX),
    topic_id: str | None = Query(None),
    news_id: str | None = Query(None),
    author_id: str | None = Query(None),
    status_filter: CommentStatus | None = Query(None, alias="status"),
) -> CommentListResponse:
    """List top-level comments with their visible replies."""
    result = comment_service.list_comments(
        db,
        actor,
        page=page,
        limit=limit,
        topic_id=topic_id,
        news_id=news_id,
        author_id=author_id,
        status=status_filter,
    )
    return CommentListResponse(
        data=[
            comment_view(row, include_replies=True, reply_filter=result.is_visible)
            for row in result.rows
        ],
        pagination=Pagination.build(page, limit, result.total),
    )


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> CommentResponse:
    """Create a comment or reply; it starts PENDING."""
    comment = comment_service.create_comment(
        db,
        actor,
        body=payload.body,
        topic_id=str(payload.topic_id) if payload.topic_id else None,
        news_id=str(payload.news_id) if payload.news_id else None,
        parent_id=payload.parent_id,
        revalidator=revalidator,
    )
    return CommentResponse(data=comment_view(comment), message="Submitted for review")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise ValidationFailedError("Request body must be JSON") from err


@router.post(
    "/moderate",
    response_model=CommentResponse | BatchModerateResponse,
)
async def moderate_comments(
    request: Request,
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> CommentResponse | BatchModerateResponse:
    """Approve or reject one comment, or a batch of up to 50.

    Checks run in a fixed order: caller (401), role (403), payload (400),
    existence (404), PENDING state (409).
    """
    actor = require_role(actor, CAN_MODERATE)
    body = await _read_json(request)

    if isinstance(body, dict) and isinstance(body.get("comment_ids"), list):
        try:
            batch = BatchModerateRequest.model_validate(body)
        except ValidationError as exc:
            raise validation_failed(exc) from exc
        processed = comment_service.batch_moderate(
            db,
            actor,
            batch.comment_ids,
            batch.status,
            reason=batch.reason,
            revalidator=revalidator,
        )
        return BatchModerateResponse(
            message=f"{processed} comments {_VERB[batch.status]}",
            processed_count=processed,
        )

    try:
        single = ModerateCommentRequest.model_validate(body)
    except ValidationError as exc:
        raise validation_failed(exc) from exc
    comment = comment_service.moderate_comment(
        db,
        actor,
        single.comment_id,
        single.status,
        reason=single.reason,
        revalidator=revalidator,
    )
    return CommentResponse(data=comment_view(comment), message=f"Comment {_VERB[single.status]}")


@router.delete(
    "/{comment_id}",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def delete_comment(
    comment_id: Annotated[int, Path(gt=0, le=COMMENT_ID_MAX)],
    actor: ActorDep,
    db: SessionDep,
    revalidator: RevalidatorDep,
) -> ActionResult | JSONResponse:
    """Delete a comment and its replies (MOD/ADMIN)."""
    try:
        comment_service.delete_comment(db, actor, comment_id, revalidator=revalidator)
    except DomainError as exc:
        return action_failure(exc)
    return ActionResult(success=True, message="Comment deleted")
