# tests/test_comment_service.py
"""Tests for the comment state machine and moderation services."""

import pytest
from sqlalchemy import update

from campus_board.core.errors import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from campus_board.models import AuditAction, Comment, CommentStatus, ModerationAuditEntry, Topic
from campus_board.services import comments as comment_service


def _status_of(db_session, comment_id: int) -> CommentStatus:
    db_session.expire_all()
    return db_session.get(Comment, comment_id).status


# --- creation -------------------------------------------------------------


def test_create_comment_is_pending(db_session, member, topic, revalidator) -> None:
    """Comments always start PENDING and belong to their author."""
    comment = comment_service.create_comment(
        db_session, member, body="First!", topic_id=topic.id, revalidator=revalidator
    )
    assert comment.status == CommentStatus.PENDING
    assert comment.author_id == member.id
    assert comment.moderated_by is None
    assert revalidator.paths == [f"/topics/{topic.id}", "/admin/comments"]


def test_moderators_cannot_self_approve(db_session, admin, topic, revalidator) -> None:
    comment = comment_service.create_comment(
        db_session, admin, body="Official note", topic_id=topic.id, revalidator=revalidator
    )
    assert comment.status == CommentStatus.PENDING


def test_create_comment_requires_actor(db_session, topic, revalidator) -> None:
    with pytest.raises(UnauthenticatedError):
        comment_service.create_comment(
            db_session, None, body="hi", topic_id=topic.id, revalidator=revalidator
        )


def test_create_comment_on_locked_topic_fails(
    db_session, member, locked_topic, revalidator
) -> None:
    with pytest.raises(InvalidStateError):
        comment_service.create_comment(
            db_session, member, body="hi", topic_id=locked_topic.id, revalidator=revalidator
        )
    assert db_session.query(Comment).count() == 0
    assert revalidator.paths == []


def test_create_comment_on_missing_topic(db_session, member, revalidator) -> None:
    with pytest.raises(NotFoundError):
        comment_service.create_comment(
            db_session,
            member,
            body="hi",
            topic_id="00000000-0000-0000-0000-000000000000",
            revalidator=revalidator,
        )


def test_create_comment_needs_exactly_one_target(
    db_session, member, topic, published_news, revalidator
) -> None:
    with pytest.raises(ValidationFailedError):
        comment_service.create_comment(db_session, member, body="hi", revalidator=revalidator)
    with pytest.raises(ValidationFailedError):
        comment_service.create_comment(
            db_session,
            member,
            body="hi",
            topic_id=topic.id,
            news_id=published_news.id,
            revalidator=revalidator,
        )


def test_create_comment_on_published_news(
    db_session, member, published_news, revalidator
) -> None:
    comment = comment_service.create_comment(
        db_session, member, body="Nice", news_id=published_news.id, revalidator=revalidator
    )
    assert comment.news_id == published_news.id
    assert comment.topic_id is None
    assert revalidator.paths[0] == f"/news/{published_news.id}"


def test_create_comment_on_draft_news_fails(db_session, member, draft_news, revalidator) -> None:
    with pytest.raises(InvalidStateError):
        comment_service.create_comment(
            db_session, member, body="Early", news_id=draft_news.id, revalidator=revalidator
        )


def test_reply_must_share_target(
    db_session, member, topic, make_comment, mod_profile, revalidator
) -> None:
    other = Topic(title="Other", body="Other topic", author_id=mod_profile.id)
    db_session.add(other)
    db_session.commit()
    parent = make_comment(body="parent", topic_id=other.id)

    with pytest.raises(ValidationFailedError):
        comment_service.create_comment(
            db_session,
            member,
            body="reply",
            topic_id=topic.id,
            parent_id=parent.id,
            revalidator=revalidator,
        )


def test_reply_to_missing_parent(db_session, member, topic, revalidator) -> None:
    with pytest.raises(NotFoundError):
        comment_service.create_comment(
            db_session,
            member,
            body="reply",
            topic_id=topic.id,
            parent_id=9999,
            revalidator=revalidator,
        )


def test_reply_on_same_topic(db_session, member, topic, make_comment, revalidator) -> None:
    parent = make_comment(status=CommentStatus.APPROVED)
    reply = comment_service.create_comment(
        db_session,
        member,
        body="reply",
        topic_id=topic.id,
        parent_id=parent.id,
        revalidator=revalidator,
    )
    assert reply.parent_id == parent.id
    assert reply.status == CommentStatus.PENDING


# --- single moderation ----------------------------------------------------


def test_moderation_scenario(db_session, member, mod, topic, revalidator) -> None:
    """Member posts, moderator approves, second moderation is a conflict."""
    c1 = comment_service.create_comment(
        db_session, member, body="C1", topic_id=topic.id, revalidator=revalidator
    )
    assert c1.status == CommentStatus.PENDING
    assert c1.author_id == member.id

    approved = comment_service.moderate_comment(
        db_session, mod, c1.id, CommentStatus.APPROVED, revalidator=revalidator
    )
    assert approved.status == CommentStatus.APPROVED
    assert approved.moderated_by == mod.id
    assert approved.moderated_at is not None

    with pytest.raises(InvalidStateError):
        comment_service.moderate_comment(
            db_session, mod, c1.id, CommentStatus.REJECTED, revalidator=revalidator
        )
    assert _status_of(db_session, c1.id) == CommentStatus.APPROVED


def test_reject_records_reason(db_session, admin, make_comment, revalidator) -> None:
    comment = make_comment()
    rejected = comment_service.moderate_comment(
        db_session,
        admin,
        comment.id,
        "REJECTED",
        reason="Off topic",
        revalidator=revalidator,
    )
    assert rejected.status == CommentStatus.REJECTED
    assert rejected.reason == "Off topic"


def test_member_cannot_moderate(db_session, member, make_comment, revalidator) -> None:
    comment = make_comment()
    with pytest.raises(ForbiddenError):
        comment_service.moderate_comment(
            db_session, member, comment.id, CommentStatus.APPROVED, revalidator=revalidator
        )
    assert _status_of(db_session, comment.id) == CommentStatus.PENDING
    assert revalidator.paths == []


def test_anonymous_cannot_moderate(db_session, make_comment, revalidator) -> None:
    comment = make_comment()
    with pytest.raises(UnauthenticatedError):
        comment_service.moderate_comment(
            db_session, None, comment.id, CommentStatus.APPROVED, revalidator=revalidator
        )
    assert _status_of(db_session, comment.id) == CommentStatus.PENDING


def test_moderate_missing_comment(db_session, mod, revalidator) -> None:
    with pytest.raises(NotFoundError):
        comment_service.moderate_comment(
            db_session, mod, 424242, CommentStatus.APPROVED, revalidator=revalidator
        )


def test_moderate_rejects_pending_as_target(db_session, mod, make_comment, revalidator) -> None:
    comment = make_comment()
    with pytest.raises(ValidationFailedError):
        comment_service.moderate_comment(
            db_session, mod, comment.id, CommentStatus.PENDING, revalidator=revalidator
        )


def test_moderate_rejects_long_reason(db_session, mod, make_comment, revalidator) -> None:
    comment = make_comment()
    with pytest.raises(ValidationFailedError):
        comment_service.moderate_comment(
            db_session,
            mod,
            comment.id,
            CommentStatus.REJECTED,
            reason="x" * 501,
            revalidator=revalidator,
        )


def test_conditional_update_guards_concurrent_moderation(
    db_session, mod, make_comment, revalidator
) -> None:
    """A comment moderated after our read is not overwritten."""
    comment = make_comment()
    # Another moderator wins the race; our session still sees PENDING.
    db_session.execute(
        update(Comment)
        .where(Comment.id == comment.id)
        .values(status=CommentStatus.REJECTED)
        .execution_options(synchronize_session=False)
    )
    db_session.commit()
    assert comment.status == CommentStatus.PENDING

    with pytest.raises(InvalidStateError):
        comment_service.moderate_comment(
            db_session, mod, comment.id, CommentStatus.APPROVED, revalidator=revalidator
        )
    assert _status_of(db_session, comment.id) == CommentStatus.REJECTED
    assert db_session.query(ModerationAuditEntry).count() == 0


def test_approval_invalidates_topic_list(
    db_session, mod, topic, make_comment, revalidator
) -> None:
    comment = make_comment()
    comment_service.moderate_comment(
        db_session, mod, comment.id, CommentStatus.APPROVED, revalidator=revalidator
    )
    assert revalidator.paths == [f"/topics/{topic.id}", "/admin/comments", "/topics"]


def test_rejection_leaves_topic_list_alone(
    db_session, mod, topic, make_comment, revalidator
) -> None:
    comment = make_comment()
    comment_service.moderate_comment(
        db_session, mod, comment.id, CommentStatus.REJECTED, revalidator=revalidator
    )
    assert revalidator.paths == [f"/topics/{topic.id}", "/admin/comments"]


def test_moderation_writes_audit_entry(db_session, mod, make_comment, revalidator) -> None:
    comment = make_comment()
    comment_service.moderate_comment(
        db_session,
        mod,
        comment.id,
        CommentStatus.REJECTED,
        reason="spam",
        revalidator=revalidator,
    )
    entry = db_session.query(ModerationAuditEntry).one()
    assert entry.actor_id == mod.id
    assert entry.action == AuditAction.MODERATE
    assert entry.target_id_list == [str(comment.id)]
    assert entry.status == "REJECTED"
    assert entry.reason == "spam"


# --- batch moderation -----------------------------------------------------


def test_batch_moderate_all_pending(db_session, admin, make_comment, revalidator) -> None:
    c2, c3, c4 = (make_comment(body=f"C{i}") for i in range(2, 5))
    processed = comment_service.batch_moderate(
        db_session, admin, [c2.id, c3.id, c4.id], CommentStatus.APPROVED, revalidator=revalidator
    )
    assert processed == 3

    db_session.expire_all()
    rows = db_session.query(Comment).filter(Comment.id.in_([c2.id, c3.id, c4.id])).all()
    assert {row.status for row in rows} == {CommentStatus.APPROVED}
    assert {row.moderated_by for row in rows} == {admin.id}
    assert len({row.moderated_at for row in rows}) == 1

    entry = db_session.query(ModerationAuditEntry).one()
    assert entry.action == AuditAction.BATCH_MODERATE
    assert sorted(entry.target_id_list) == sorted(str(c.id) for c in (c2, c3, c4))


def test_batch_with_moderated_comment_changes_nothing(
    db_session, mod, make_comment, revalidator
) -> None:
    pending = make_comment(body="pending")
    approved = make_comment(body="approved", status=CommentStatus.APPROVED)

    with pytest.raises(InvalidStateError) as exc_info:
        comment_service.batch_moderate(
            db_session,
            mod,
            [pending.id, approved.id],
            CommentStatus.REJECTED,
            revalidator=revalidator,
        )
    assert exc_info.value.details == [{"comment_ids": [approved.id]}]
    assert _status_of(db_session, pending.id) == CommentStatus.PENDING
    assert _status_of(db_session, approved.id) == CommentStatus.APPROVED
    assert revalidator.paths == []


def test_batch_with_missing_id_changes_nothing(db_session, mod, make_comment, revalidator) -> None:
    pending = make_comment()
    with pytest.raises(NotFoundError) as exc_info:
        comment_service.batch_moderate(
            db_session, mod, [pending.id, 31337], CommentStatus.APPROVED, revalidator=revalidator
        )
    assert exc_info.value.details == [{"missing_ids": [31337]}]
    assert _status_of(db_session, pending.id) == CommentStatus.PENDING


def test_batch_rolls_back_when_guard_misses(db_session, mod, make_comment, revalidator) -> None:
    first = make_comment(body="first")
    second = make_comment(body="second")
    db_session.execute(
        update(Comment)
        .where(Comment.id == second.id)
        .values(status=CommentStatus.APPROVED)
        .execution_options(synchronize_session=False)
    )
    db_session.commit()

    with pytest.raises(InvalidStateError):
        comment_service.batch_moderate(
            db_session,
            mod,
            [first.id, second.id],
            CommentStatus.REJECTED,
            revalidator=revalidator,
        )
    assert _status_of(db_session, first.id) == CommentStatus.PENDING
    assert _status_of(db_session, second.id) == CommentStatus.APPROVED


def test_batch_size_bounds(db_session, mod, revalidator) -> None:
    with pytest.raises(ValidationFailedError):
        comment_service.batch_moderate(
            db_session, mod, [], CommentStatus.APPROVED, revalidator=revalidator
        )
    with pytest.raises(ValidationFailedError):
        comment_service.batch_moderate(
            db_session, mod, list(range(1, 52)), CommentStatus.APPROVED, revalidator=revalidator
        )


def test_batch_deduplicates_ids(db_session, mod, make_comment, revalidator) -> None:
    comment = make_comment()
    processed = comment_service.batch_moderate(
        db_session,
        mod,
        [comment.id, comment.id],
        CommentStatus.APPROVED,
        revalidator=revalidator,
    )
    assert processed == 1


def test_member_cannot_batch_moderate(db_session, member, make_comment, revalidator) -> None:
    comment = make_comment()
    with pytest.raises(ForbiddenError):
        comment_service.batch_moderate(
            db_session, member, [comment.id], CommentStatus.APPROVED, revalidator=revalidator
        )
    assert _status_of(db_session, comment.id) == CommentStatus.PENDING


# --- deletion and listing -------------------------------------------------


def test_delete_comment_removes_replies(db_session, mod, make_comment, revalidator) -> None:
    parent = make_comment(status=CommentStatus.APPROVED)
    reply = make_comment(body="reply", parent_id=parent.id)
    nested = make_comment(body="nested", parent_id=reply.id)

    removed = comment_service.delete_comment(db_session, mod, parent.id, revalidator=revalidator)
    assert removed == 3
    db_session.expire_all()
    for comment_id in (parent.id, reply.id, nested.id):
        assert db_session.get(Comment, comment_id) is None
    assert "/admin/comments" in revalidator.paths


def test_member_cannot_delete_comment(db_session, member, make_comment, revalidator) -> None:
    comment = make_comment()
    with pytest.raises(ForbiddenError):
        comment_service.delete_comment(db_session, member, comment.id, revalidator=revalidator)
    assert db_session.get(Comment, comment.id) is not None


def test_list_comments_visibility(
    db_session, member, mod, admin_profile, make_comment
) -> None:
    approved = make_comment(body="approved", status=CommentStatus.APPROVED)
    own_pending = make_comment(body="mine")
    others_pending = make_comment(body="theirs", author=admin_profile)
    rejected = make_comment(body="rejected", status=CommentStatus.REJECTED, author=admin_profile)

    anonymous = comment_service.list_comments(db_session, None)
    assert {c.id for c in anonymous.rows} == {approved.id}

    as_member = comment_service.list_comments(db_session, member)
    assert {c.id for c in as_member.rows} == {approved.id, own_pending.id}

    as_mod = comment_service.list_comments(db_session, mod)
    assert as_mod.total == 4
    assert {c.id for c in as_mod.rows} == {
        approved.id,
        own_pending.id,
        others_pending.id,
        rejected.id,
    }

    pending_only = comment_service.list_comments(db_session, mod, status=CommentStatus.PENDING)
    assert {c.id for c in pending_only.rows} == {own_pending.id, others_pending.id}


def test_list_comments_excludes_replies_from_top_level(
    db_session, mod, make_comment
) -> None:
    parent = make_comment(status=CommentStatus.APPROVED)
    make_comment(body="reply", parent_id=parent.id)

    page = comment_service.list_comments(db_session, mod)
    assert [c.id for c in page.rows] == [parent.id]
    assert len(page.rows[0].replies) == 1
