"""
Tests for the Message Router

Tests for join-room, leave-room, relay, send-message and disconnect
handling, including the error paths reported to the requester.
"""

import pytest

from signaling import Delivery, MessageRouter, RelayState
from signaling.schemas import (
    Disconnect,
    JoinRoom,
    LeaveRoom,
    Relay,
    SendMessage,
)


@pytest.fixture
def router():
    router = MessageRouter(RelayState())
    for name in ("A", "B", "C"):
        router.handle_connect(name)
    return router


def frames_for(deliveries, connection_id):
    """Frames addressed to one connection, in order."""
    return [d.message for d in deliveries if d.connection_id == connection_id]


def types_for(deliveries, connection_id):
    return [m["type"] for m in frames_for(deliveries, connection_id)]


# Connect


def test_handle_connect_sends_welcome():
    router = MessageRouter(RelayState())

    deliveries = router.handle_connect("A")

    assert deliveries == [
        Delivery(
            "A",
            {
                "type": "welcome",
                "data": {
                    "message": "Connected to signaling server",
                    "yourId": "A",
                },
            },
        )
    ]
    assert router.state.is_connected("A")


# Join room


def test_first_join(router):
    deliveries = router.dispatch("A", JoinRoom("x"))

    assert frames_for(deliveries, "A") == [
        {"type": "user-count", "data": 1},
        {"type": "room-joined", "data": {"roomId": "x", "userCount": 1}},
    ]
    assert len(deliveries) == 2


def test_second_join_notifies_existing_member(router):
    router.dispatch("A", JoinRoom("x"))

    deliveries = router.dispatch("B", JoinRoom("x"))

    assert frames_for(deliveries, "A") == [
        {"type": "user-joined", "data": "B"},
        {"type": "user-count", "data": 2},
    ]
    assert frames_for(deliveries, "B")[-1] == {
        "type": "room-joined",
        "data": {"roomId": "x", "userCount": 2},
    }
    assert "user-joined" not in types_for(deliveries, "B")


@pytest.mark.parametrize("room_id", ["", None, 42, ["x"], {"id": "x"}])
def test_join_invalid_room_id(router, room_id):
    deliveries = router.dispatch("A", JoinRoom(room_id))

    assert deliveries == [
        Delivery("A", {"type": "error", "data": {"message": "Invalid room ID"}})
    ]
    assert router.state.current_room("A") is None
    assert router.state.room_count() == 0


def test_invalid_join_keeps_current_room(router):
    router.dispatch("A", JoinRoom("x"))

    router.dispatch("A", JoinRoom(""))

    assert router.state.current_room("A") == "x"


def test_switching_rooms_notifies_old_room(router):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("x"))

    deliveries = router.dispatch("A", JoinRoom("y"))

    assert frames_for(deliveries, "B") == [
        {"type": "user-left", "data": "A"},
        {"type": "user-count", "data": 1},
    ]
    assert frames_for(deliveries, "A") == [
        {"type": "user-count", "data": 1},
        {"type": "room-joined", "data": {"roomId": "y", "userCount": 1}},
    ]
    assert router.state.room_members("x") == ["B"]
    assert router.state.room_members("y") == ["A"]


def test_switching_out_of_sole_membership_deletes_room(router):
    router.dispatch("A", JoinRoom("x"))

    deliveries = router.dispatch("A", JoinRoom("y"))

    assert types_for(deliveries, "A") == ["user-count", "room-joined"]
    assert [room for room, _ in router.state.snapshot()] == ["y"]


def test_rejoin_same_room_is_idempotent_but_notifies(router):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("x"))

    deliveries = router.dispatch("A", JoinRoom("x"))

    assert sorted(router.state.room_members("x")) == ["A", "B"]
    assert types_for(deliveries, "B") == [
        "user-left",
        "user-count",
        "user-joined",
        "user-count",
    ]
    assert frames_for(deliveries, "A")[-1]["data"] == {
        "roomId": "x",
        "userCount": 2,
    }


# Leave room


def test_leave_room(router):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("x"))

    deliveries = router.dispatch("A", LeaveRoom())

    assert frames_for(deliveries, "A") == [
        {"type": "room-left", "data": {"roomId": "x"}}
    ]
    assert types_for(deliveries, "B") == ["user-left", "user-count"]
    assert router.state.current_room("A") is None


def test_leave_room_when_unjoined(router):
    deliveries = router.dispatch("A", LeaveRoom())

    assert deliveries == [
        Delivery(
            "A",
            {"type": "error", "data": {"message": "Please join a room first"}},
        )
    ]


# Relay


@pytest.mark.parametrize(
    "kind,key",
    [("offer", "offer"), ("answer", "answer"), ("ice-candidate", "candidate")],
)
def test_relay_goes_to_target_only(router, kind, key):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("x"))
    router.dispatch("C", JoinRoom("x"))
    payload = {"type": kind, "sdp": "v=0\r\no=- 46117 2 IN IP4 127.0.0.1\r\n"}

    deliveries = router.dispatch("B", Relay(kind, "A", payload))

    assert deliveries == [
        Delivery("A", {"type": kind, "data": {key: payload, "from": "B"}})
    ]
    assert deliveries[0].message["data"][key] is payload


def test_relay_crosses_rooms(router):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("y"))

    deliveries = router.dispatch("B", Relay("offer", "A", "sdp"))

    assert [d.connection_id for d in deliveries] == ["A"]


def test_relay_requires_room(router):
    deliveries = router.dispatch("A", Relay("offer", "B", "sdp"))

    assert len(deliveries) == 1
    assert deliveries[0].connection_id == "A"
    assert deliveries[0].message["type"] == "error"


@pytest.mark.parametrize("target", ["ghost", None, 7])
def test_relay_to_unknown_target_is_dropped(router, target):
    router.dispatch("A", JoinRoom("x"))

    assert router.dispatch("A", Relay("answer", target, "sdp")) == []


# Send message


def test_send_message_reaches_whole_room(router):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("x"))
    router.dispatch("C", JoinRoom("y"))

    deliveries = router.dispatch("A", SendMessage("hello"))

    assert sorted(d.connection_id for d in deliveries) == ["A", "B"]
    for delivery in deliveries:
        assert delivery.message["type"] == "new-message"
        assert delivery.message["data"]["from"] == "A"
        assert delivery.message["data"]["message"] == "hello"
        assert delivery.message["data"]["timestamp"]


def test_send_message_while_unjoined(router):
    deliveries = router.dispatch("A", SendMessage("hello"))

    assert deliveries == [
        Delivery(
            "A",
            {"type": "error", "data": {"message": "Please join a room first"}},
        )
    ]


# Disconnect


def test_disconnect_notifies_remaining_members(router):
    router.dispatch("A", JoinRoom("x"))
    router.dispatch("B", JoinRoom("x"))

    deliveries = router.dispatch("A", Disconnect("transport close"))

    assert deliveries == [
        Delivery("B", {"type": "user-left", "data": "A"}),
        Delivery("B", {"type": "user-count", "data": 1}),
    ]
    assert not router.state.is_connected("A")


def test_disconnect_last_member_removes_room(router):
    router.dispatch("A", JoinRoom("x"))

    assert router.dispatch("A", Disconnect("ping timeout")) == []
    assert router.state.room_count() == 0


def test_disconnect_unjoined(router):
    assert router.dispatch("C", Disconnect(None)) == []
    assert not router.state.is_connected("C")


def test_unsupported_event_type_raises(router):
    with pytest.raises(TypeError):
        router.dispatch("A", object())


# Full scenario


def test_two_peer_scenario(router):
    deliveries = router.dispatch("A", JoinRoom("x"))
    assert frames_for(deliveries, "A")[-1] == {
        "type": "room-joined",
        "data": {"roomId": "x", "userCount": 1},
    }

    deliveries = router.dispatch("B", JoinRoom("x"))
    assert frames_for(deliveries, "B")[-1]["data"]["userCount"] == 2
    assert frames_for(deliveries, "A") == [
        {"type": "user-joined", "data": "B"},
        {"type": "user-count", "data": 2},
    ]

    deliveries = router.dispatch("B", Relay("offer", "A", {"sdp": "..."}))
    assert deliveries == [
        Delivery(
            "A", {"type": "offer", "data": {"offer": {"sdp": "..."}, "from": "B"}}
        )
    ]

    deliveries = router.dispatch("A", Disconnect("client namespace disconnect"))
    assert frames_for(deliveries, "B") == [
        {"type": "user-left", "data": "A"},
        {"type": "user-count", "data": 1},
    ]
    assert router.state.snapshot() == [("x", ["B"])]

    router.dispatch("B", Disconnect("transport close"))
    assert router.state.snapshot() == []


@pytest.mark.parametrize("kind", ["offer", "answer", "ice-candidate"])
def test_relay_to_self_is_dropped(router, kind):
    router.dispatch("A", JoinRoom("x"))

    assert router.dispatch("A", Relay(kind, "A", "sdp")) == []
