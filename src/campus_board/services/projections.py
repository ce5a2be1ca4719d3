"""Read-model projections built from canonical rows.

Mutation code never depends on these shapes; endpoints call them when
building responses.
"""

from __future__ import annotations

from collections.abc import Callable

from campus_board.models import Comment, News, Profile, Topic
from campus_board.schemas.comment import CommentView
from campus_board.schemas.news import NewsView
from campus_board.schemas.profile import ProfileSummary
from campus_board.schemas.topic import TopicSummary, TopicView

CommentFilter = Callable[[Comment], bool]


def profile_summary(profile: Profile | None) -> ProfileSummary | None:
    if profile is None:
        return None
    return ProfileSummary.model_validate(profile)


def comment_view(
    comment: Comment,
    *,
    include_replies: bool = False,
    reply_filter: CommentFilter | None = None,
) -> CommentView:
    """Project a comment with its author, topic, moderator and nested replies."""
    replies: list[CommentView] = []
    if include_replies:
        replies = [
            comment_view(reply, include_replies=True, reply_filter=reply_filter)
            for reply in comment.replies
            if reply_filter is None or reply_filter(reply)
        ]
    return CommentView(
        id=comment.id,
        topic_id=comment.topic_id,
        news_id=comment.news_id,
        parent_id=comment.parent_id,
        body=comment.body,
        status=comment.status,
        author_id=comment.author_id,
        moderated_by=comment.moderated_by,
        moderated_at=comment.moderated_at,
        reason=comment.reason,
        created_at=comment.created_at,
        author=profile_summary(comment.author),
        topic=TopicSummary.model_validate(comment.topic) if comment.topic else None,
        moderator=profile_summary(comment.moderator),
        replies=replies,
    )


def topic_view(topic: Topic, comment_count: int = 0) -> TopicView:
    return TopicView(
        id=topic.id,
        title=topic.title,
        body=topic.body,
        status=topic.status,
        author_id=topic.author_id,
        author=profile_summary(topic.author),
        created_at=topic.created_at,
        comment_count=comment_count,
    )


def news_view(news: News) -> NewsView:
    return NewsView(
        id=news.id,
        title=news.title,
        body=news.body,
        summary=news.summary,
        category=news.category,
        status=news.status,
        author_id=news.author_id,
        author=profile_summary(news.author),
        created_at=news.created_at,
        published_at=news.published_at,
        reviewed_by=news.reviewed_by,
        reviewed_at=news.reviewed_at,
        review_note=news.review_note,
    )
