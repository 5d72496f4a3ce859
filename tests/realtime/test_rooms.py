# tests/realtime/test_rooms.py
"""Tests for conversation identifiers and room membership."""

from career_connect.realtime.rooms import (
    RoomRegistry,
    canonical_id,
    is_participant,
    notification_room,
    partner_of,
)


def test_canonical_id_is_order_independent() -> None:
    assert canonical_id("u2", "u1") == canonical_id("u1", "u2") == "u1_u2"


def test_canonical_id_uses_custom_separator() -> None:
    assert canonical_id("b", "a", separator=":") == "a:b"


def test_partner_of_resolves_either_side() -> None:
    assert partner_of("alice_bob", "alice") == "bob"
    assert partner_of("alice_bob", "bob") == "alice"
    assert is_participant("alice_bob", "bob")
    assert not is_participant("alice_bob", "carol")


def test_partner_of_handles_ids_containing_separator() -> None:
    conversation = canonical_id("ann_lee", "bob")
    assert conversation == "ann_lee_bob"
    assert partner_of(conversation, "bob") == "ann_lee"
    assert partner_of(conversation, "ann_lee") == "bob"
    assert partner_of(conversation, "lee") is None
    assert partner_of(conversation, "carol") is None


def test_partner_of_rejects_non_participants() -> None:
    assert partner_of("alice", "alice") is None
    assert partner_of("bob_bob", "bob") is None
    assert partner_of("_bob", "bob") is None
    assert partner_of("alice_bob", "") is None


def test_notification_room_name() -> None:
    assert notification_room("u1") == "notifications_u1"


def test_join_and_leave_are_idempotent() -> None:
    rooms: RoomRegistry[str] = RoomRegistry()
    rooms.join("conn-a", "room")
    rooms.join("conn-a", "room")
    assert rooms.members("room") == ["conn-a"]

    rooms.leave("conn-a", "room")
    rooms.leave("conn-a", "room")
    rooms.leave("conn-b", "never-joined")
    assert rooms.members("room") == []
    assert rooms.rooms_of("conn-a") == frozenset()


def test_members_excludes_origin() -> None:
    rooms: RoomRegistry[str] = RoomRegistry()
    rooms.join("conn-a", "room")
    rooms.join("conn-b", "room")
    assert rooms.members("room", exclude="conn-a") == ["conn-b"]


def test_leave_all_returns_every_room() -> None:
    rooms: RoomRegistry[str] = RoomRegistry()
    rooms.join("conn-a", "r2")
    rooms.join("conn-a", "r1")
    rooms.join("conn-b", "r1")

    assert rooms.leave_all("conn-a") == ["r1", "r2"]
    assert rooms.members("r1") == ["conn-b"]
    assert rooms.members("r2") == []
    assert not rooms.is_member("conn-a", "r1")
