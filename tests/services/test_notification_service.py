# tests/services/test_notification_service.py
"""Tests for notification creation and read-state rules."""

from career_connect.models import NotificationType
from career_connect.repositories import MessageRepository
from career_connect.schemas.notification import NotificationCreate
from career_connect.services.notifications import NotificationService, preview_text


def test_preview_text_truncates_long_content() -> None:
    assert preview_text("short") == "short"
    assert preview_text("x" * 100) == "x" * 100
    assert preview_text("x" * 101) == "x" * 100 + "..."
    assert preview_text("abcdef", length=3) == "abc..."


def test_create_snapshots_sender(db_session, make_profile) -> None:
    make_profile("alice", "Alice Smith", "https://img.example/a.png")
    service = NotificationService(db_session)

    notification = service.create(
        NotificationCreate(
            user_id="bob",
            type=NotificationType.CONNECTION_REQUEST,
            title="Connection request",
            message="Alice wants to connect",
            sender_id="alice",
        )
    )

    assert notification.sender_name == "Alice Smith"
    assert notification.sender_photo_url == "https://img.example/a.png"
    assert notification.read is False


def test_create_without_sender_uses_system_name(db_session) -> None:
    notification = NotificationService(db_session).create(
        NotificationCreate(
            user_id="bob",
            type=NotificationType.SYSTEM_ANNOUNCEMENT,
            title="Maintenance",
            message="Back soon",
        )
    )
    assert notification.sender_name == "System"


def test_message_notification_preview(db_session) -> None:
    message = MessageRepository(db_session).create(
        conversation_id="alice_bob",
        sender_id="alice",
        receiver_id="bob",
        content="y" * 150,
    )
    notification = NotificationService(db_session).create_for_message(message, None)

    assert notification.message == "y" * 100 + "..."
    assert notification.sender_name == "Someone"
    assert notification.target_id == "alice_bob"


def test_read_state_and_pagination(db_session) -> None:
    service = NotificationService(db_session)
    created = [
        service.notifications.create(user_id="bob", type="post_like", title=f"n{i}", message="m")
        for i in range(5)
    ]
    service.notifications.create(user_id="carol", type="post_like", title="other", message="m")
    db_session.commit()

    assert service.mark_read(created[0].id, "carol") == 0
    assert service.mark_read(created[0].id, "bob") == 1
    assert service.mark_read(created[0].id, "bob") == 1

    items, total, unread = service.list_for_user("bob", limit=2)
    assert len(items) == 2
    assert total == 5
    assert unread == 4

    items, total, _ = service.list_for_user("bob", unread_only=True, limit=10)
    assert total == 4
    assert all(not item.read for item in items)

    assert service.mark_all_read("bob") == 4
    assert service.unread_count("bob") == 0
    assert service.unread_count("carol") == 1

    assert service.delete(created[1].id, "carol") == 0
    assert service.delete(created[1].id, "bob") == 1
    assert service.clear_all("bob") == 4
    assert service.list_for_user("bob")[1] == 0
