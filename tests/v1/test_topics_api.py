# tests/v1/test_topics_api.py
"""Tests for topic endpoints and their action results."""

from fastapi import status

from campus_board.models import Comment, CommentStatus, Topic, TopicStatus

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def test_list_topics_is_public(client, topic, make_comment) -> None:
    make_comment(status=CommentStatus.APPROVED)
    make_comment(status=CommentStatus.PENDING)

    response = client.get("/api/v1/topics")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["pagination"]["total"] == 1
    assert data["data"][0]["id"] == topic.id
    assert data["data"][0]["comment_count"] == 1
    assert data["data"][0]["author"]["display_name"] == "Mod"


def test_list_topics_rejects_oversized_page(client) -> None:
    response = client.get("/api/v1/topics", params={"limit": 51})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "details" in response.json()


def test_get_topic(client, topic) -> None:
    response = client.get(f"/api/v1/topics/{topic.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "OPEN"


def test_get_missing_topic(client) -> None:
    response = client.get(f"/api/v1/topics/{MISSING_ID}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Topic not found"}


def test_create_topic(client, mod_headers, db_session) -> None:
    response = client.post(
        "/api/v1/topics",
        json={"title": "Bike racks", "body": "We need more of them."},
        headers=mod_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"success": True, "message": "Topic created"}
    assert db_session.query(Topic).filter(Topic.title == "Bike racks").count() == 1


def test_member_cannot_create_topic(client, member_headers) -> None:
    response = client.post(
        "/api/v1/topics",
        json={"title": "Bike racks", "body": "We need more of them."},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"success": False, "error": "Insufficient permission"}


def test_lock_and_unlock_topic(client, topic, admin_headers, db_session, revalidator) -> None:
    response = client.post(f"/api/v1/topics/{topic.id}/lock", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Topic locked"}
    db_session.expire_all()
    assert db_session.get(Topic, topic.id).status == TopicStatus.LOCKED
    assert f"/topics/{topic.id}" in revalidator.paths

    response = client.post(f"/api/v1/topics/{topic.id}/unlock", headers=admin_headers)
    assert response.json() == {"success": True, "message": "Topic unlocked"}
    db_session.expire_all()
    assert db_session.get(Topic, topic.id).status == TopicStatus.OPEN


def test_lock_requires_auth(client, topic) -> None:
    response = client.post(f"/api/v1/topics/{topic.id}/lock")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["success"] is False


def test_member_cannot_lock(client, topic, member_headers, db_session) -> None:
    response = client.post(f"/api/v1/topics/{topic.id}/lock", headers=member_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.expire_all()
    assert db_session.get(Topic, topic.id).status == TopicStatus.OPEN


def test_lock_missing_topic(client, mod_headers) -> None:
    response = client.post(f"/api/v1/topics/{MISSING_ID}/lock", headers=mod_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "error": "Topic not found"}


def test_delete_topic(client, topic, make_comment, mod_headers, db_session) -> None:
    make_comment()
    topic_id = topic.id

    response = client.delete(f"/api/v1/topics/{topic_id}", headers=mod_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Topic deleted"}
    db_session.expire_all()
    assert db_session.query(Comment).filter(Comment.topic_id == topic_id).count() == 0


def test_post_comment_action(client, topic, member_headers, db_session) -> None:
    response = client.post(
        f"/api/v1/topics/{topic.id}/comments",
        json={"body": "Count me in"},
        headers=member_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "Submitted for review"}
    comment = db_session.query(Comment).one()
    assert comment.status == CommentStatus.PENDING


def test_post_comment_on_locked_topic(client, locked_topic, admin_headers, db_session) -> None:
    response = client.post(
        f"/api/v1/topics/{locked_topic.id}/comments",
        json={"body": "Even admins wait"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["success"] is False
    assert db_session.query(Comment).count() == 0


def test_post_comment_anonymous(client, topic) -> None:
    response = client.post(f"/api/v1/topics/{topic.id}/comments", json={"body": "hi"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "error": "Authentication required"}
