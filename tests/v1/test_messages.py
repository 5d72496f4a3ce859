# tests/v1/test_messages.py
"""Tests for message-related endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from career_connect.repositories import MessageRepository


def _send(client: TestClient, pair: dict[str, str], content: str = "Hello Bob"):
    return client.post(
        "/api/v1/messages/send",
        json={
            "conversationId": pair["conversation"],
            "senderId": pair["sender"],
            "receiverId": pair["receiver"],
            "content": content,
        },
    )


def test_send_message(client: TestClient, connected_pair) -> None:
    """Test sending a message between connected users."""
    response = _send(client, connected_pair)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Message sent successfully"
    assert body["data"]["conversationId"] == "alice_bob"
    assert body["data"]["senderId"] == "alice"
    assert body["data"]["read"] is False

    unread = client.get("/api/v1/notifications/unread-count/bob").json()
    assert unread == {"success": True, "count": 1}


def test_send_message_missing_fields(client: TestClient) -> None:
    response = client.post("/api/v1/messages/send", json={"senderId": "alice"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["success"] is False
    assert response.json()["message"] == "Missing required fields"


def test_send_message_to_unknown_user(client: TestClient, make_profile) -> None:
    make_profile("alice")
    response = _send(
        client,
        {"conversation": "alice_ghost", "sender": "alice", "receiver": "ghost"},
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "message": "User not found"}


def test_send_message_requires_connection(client: TestClient, make_profile) -> None:
    make_profile("alice")
    make_profile("carol")
    response = _send(
        client,
        {"conversation": "alice_carol", "sender": "alice", "receiver": "carol"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "You can only message your connections"


def test_send_message_outside_conversation(client: TestClient, connected_pair) -> None:
    response = _send(
        client,
        {"conversation": "bob_carol", "sender": "alice", "receiver": "bob"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "Access denied to this conversation"


def test_conversation_history(client: TestClient, connected_pair) -> None:
    for content in ("first", "second", "third"):
        assert _send(client, connected_pair, content).status_code == status.HTTP_201_CREATED

    response = client.get(
        "/api/v1/messages/conversation/alice_bob",
        params={"userId": "bob", "limit": 2},
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [item["content"] for item in body["messages"]] == ["second", "third"]
    assert body["hasMore"] is True

    unread = client.get("/api/v1/messages/unread-count/bob").json()
    assert unread["count"] == 0


def test_conversation_history_access(client: TestClient) -> None:
    outsider = client.get("/api/v1/messages/conversation/alice_bob", params={"userId": "carol"})
    assert outsider.status_code == status.HTTP_403_FORBIDDEN

    malformed = client.get("/api/v1/messages/conversation/alice", params={"userId": "alice"})
    assert malformed.status_code == status.HTTP_400_BAD_REQUEST
    assert malformed.json()["message"] == "Invalid conversation ID"


def test_mark_read_counts_modified(client: TestClient, connected_pair) -> None:
    _send(client, connected_pair, "one")
    _send(client, connected_pair, "two")
    assert client.get("/api/v1/messages/unread-count/bob").json()["count"] == 2

    payload = {"conversationId": "alice_bob", "userId": "bob"}
    first = client.post("/api/v1/messages/mark-read", json=payload)
    second = client.post("/api/v1/messages/mark-read", json=payload)

    assert first.json()["modifiedCount"] == 2
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["modifiedCount"] == 0


def test_delete_message(client: TestClient, db_session) -> None:
    message = MessageRepository(db_session).create(
        conversation_id="alice_bob", sender_id="alice", receiver_id="bob", content="oops"
    )
    db_session.commit()
    url = f"/api/v1/messages/message/{message.id}"

    forbidden = client.request("DELETE", url, json={"userId": "bob"})
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    deleted = client.request("DELETE", url, json={"userId": "alice"})
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json()["success"] is True

    missing = client.request("DELETE", url, json={"userId": "alice"})
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["message"] == "Message not found"


def test_search_messages(client: TestClient, connected_pair) -> None:
    _send(client, connected_pair, "Interview on Monday")
    _send(client, connected_pair, "See you then")

    response = client.get(
        "/api/v1/messages/search/alice_bob",
        params={"query": "interview", "userId": "alice"},
    )
    body = response.json()
    assert response.status_code == status.HTTP_200_OK
    assert body["count"] == 1
    assert body["messages"][0]["content"] == "Interview on Monday"

    empty = client.get("/api/v1/messages/search/alice_bob", params={"userId": "alice"})
    assert empty.status_code == status.HTTP_400_BAD_REQUEST
    assert empty.json()["message"] == "Search query is required"


def test_list_conversations(client: TestClient, connected_pair) -> None:
    _send(client, connected_pair, "ping")

    body = client.get("/api/v1/messages/conversations/bob").json()

    assert body["count"] == 1
    conversation = body["conversations"][0]
    assert conversation["conversationId"] == "alice_bob"
    assert conversation["partner"]["uid"] == "alice"
    assert conversation["partner"]["photoURL"] == "https://img.example/alice.png"
    assert conversation["lastMessage"]["content"] == "ping"
    assert conversation["unreadCount"] == 1


def test_send_message_trims_content(client: TestClient, connected_pair) -> None:
    response = _send(client, connected_pair, "  Hello Bob  \n")
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["data"]["content"] == "Hello Bob"


def test_send_message_between_ids_containing_separator(
    client: TestClient, db_session, make_profile
) -> None:
    from career_connect.models import Connection
    from career_connect.realtime.rooms import canonical_id

    make_profile("ann_lee", "Ann Lee")
    make_profile("bob", "Bob Jones")
    db_session.add(Connection(sender_id="ann_lee", receiver_id="bob", status="accepted"))
    db_session.commit()
    conversation = canonical_id("ann_lee", "bob")

    sent = _send(client, {"conversation": conversation, "sender": "bob", "receiver": "ann_lee"})
    assert sent.status_code == status.HTTP_201_CREATED

    history = client.get(
        f"/api/v1/messages/conversation/{conversation}", params={"userId": "ann_lee"}
    )
    assert history.status_code == status.HTTP_200_OK
    assert [item["senderId"] for item in history.json()["messages"]] == ["bob"]

    found = client.get(
        f"/api/v1/messages/search/{conversation}", params={"query": "hello", "userId": "ann_lee"}
    )
    assert found.json()["count"] == 1
