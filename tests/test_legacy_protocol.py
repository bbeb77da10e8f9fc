import pytest

from mmoclient.legacy_protocol import (
    AvatarInfo,
    KeyInput,
    LegacyAttack,
    LegacyChat,
    LegacyChatRequest,
    LegacyEnter,
    LegacyLeave,
    LegacyLogin,
    LegacyLoginFail,
    LegacyMove,
    LegacyMoveRequest,
    LegacyPacket,
    LegacyTeleport,
    LoginUser,
    LogoutUser,
    MoveUser,
    StatChange,
)
from mmoclient.protocol import ProtocolError


def test_key_input_wire_bytes():
    assert KeyInput(3, 1).encode() == b"\x04\x01\x03\x01"


def test_empty_attack_wire_bytes():
    assert LegacyAttack().encode() == b"\x02\x0a"


def test_chat_request_wire_bytes():
    assert LegacyChatRequest("hi").encode() == b"\x05\x0bhi\x00"


@pytest.mark.parametrize(
    "packet",
    [
        AvatarInfo(7, -3, 12, 100, 80, 4, 1234),
        LegacyMove(99, 1999, 0),
        LegacyEnter(5, "slime", 1, 10, 20),
        LegacyLeave(-1),
        LegacyChat(-1, "system says hello"),
        StatChange(8, 50, 2, 300),
        LegacyLoginFail(0, 3),
        LegacyLogin("alice"),
        LegacyMoveRequest(4),
        LegacyAttack(),
        LegacyChatRequest("hello there"),
        LegacyTeleport(),
        KeyInput(1, 2),
        LoginUser(1, 2, 3),
        LogoutUser(9),
        MoveUser(4, 5, 6),
    ],
)
def test_round_trip(packet):
    wire = packet.encode()
    assert wire[0] == len(wire)
    assert type(packet).decode(wire) == packet


def test_decode_ignores_following_bytes():
    wire = LegacyMove(1, 2, 3).encode()
    assert LegacyMove.decode(wire + b"\xff\xff") == LegacyMove(1, 2, 3)


def test_decode_rejects_wrong_type():
    with pytest.raises(ProtocolError):
        LegacyMove.decode(LegacyLeave(1).encode())


def test_decode_rejects_truncated():
    wire = AvatarInfo(1, 2, 3, 4, 5, 6, 7).encode()
    with pytest.raises(ProtocolError):
        AvatarInfo.decode(wire[:-1])


def test_decode_rejects_wrong_size():
    wire = bytearray(LegacyLeave(1).encode())
    wire[0] -= 1
    with pytest.raises(ProtocolError):
        LegacyLeave.decode(bytes(wire))


def test_base_class_cannot_decode():
    with pytest.raises(TypeError):
        LegacyPacket.decode(b"\x02\x0a")


def test_name_too_long():
    with pytest.raises(ProtocolError):
        LegacyLogin("x" * 20).encode()


def test_chat_must_fit_in_size_byte():
    with pytest.raises(ProtocolError):
        LegacyChat(1, "y" * 250).encode()


def test_chat_rejects_nul():
    with pytest.raises(ProtocolError):
        LegacyChatRequest("a\0b").encode()


def test_out_of_range_value():
    with pytest.raises(ProtocolError):
        KeyInput(300, 1).encode()