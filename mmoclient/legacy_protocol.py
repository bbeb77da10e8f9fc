"""Older packet layouts: the classic game header and the first key-input protocol.

Every packet starts with one byte of total size and one byte of type.  The
two families use overlapping type numbers, so a packet is always decoded
through the class it is expected to be.  Chat packets carry their message
NUL-terminated at the end and are only as long as the message needs, so that
the total size still fits in the one-byte size field.
"""

from __future__ import annotations

import dataclasses
import re
import struct
from dataclasses import dataclass
from typing import ClassVar

from .protocol import HEADER_SIZE, ProtocolError

GAME_PORT = 3000
MAX_ID_LENGTH = 20
LEGACY_MAX_CHAT_LENGTH = 255
MAP_WIDTH = 2000
MAP_HEIGHT = 2000
MAX_PACKET_SIZE = 0xFF

S2C_P_AVATAR_INFO = 1
S2C_P_MOVE = 2
S2C_P_ENTER = 3
S2C_P_LEAVE = 4
C2S_P_LOGIN = 5
C2S_P_MOVE = 6
S2C_P_CHAT = 7
S2C_P_STAT_CHANGE = 8
S2C_P_LOGIN_FAIL = 9
C2S_P_ATTACK = 10
C2S_P_CHAT = 11
C2S_P_TELEPORT = 12

NP_CS_KEY_INPUT = 1
NP_SC_LOGIN_USER = 2
NP_SC_LOGOUT_USER = 3
NP_SC_MOVE_USER = 4

_CODE = re.compile(r"(\d*)([a-zA-Z?])")


def _encode_text(text: str, capacity: int) -> bytes:
    raw = text.encode("utf-8")
    if b"\0" in raw:
        raise ProtocolError("text must not contain NUL characters")
    if len(raw) >= capacity:
        raise ProtocolError(f"text of {len(raw)} bytes does not fit in {capacity} bytes")
    return raw


def _decode_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass
class LegacyPacket:
    """Header handling shared by all legacy packets."""

    packet_type: ClassVar[int]
    _format: ClassVar[str] = ""
    _tail_capacity: ClassVar[int] = 0
    _struct: ClassVar[struct.Struct] = struct.Struct("<")
    _codes: ClassVar[tuple[tuple[int, str], ...]] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._struct = struct.Struct("<" + cls._format)
        cls._codes = tuple(
            (int(count) if count else 1, code) for count, code in _CODE.findall(cls._format)
        )

    def _body(self) -> bytes:
        fields = dataclasses.fields(self)
        values = []
        for f, (count, code) in zip(fields, self._codes):
            value = getattr(self, f.name)
            values.append(_encode_text(value, count) if code == "s" else value)
        body = self._struct.pack(*values)
        if self._tail_capacity:
            tail = getattr(self, fields[-1].name)
            body += _encode_text(tail, self._tail_capacity) + b"\0"
        return body

    @classmethod
    def _parse_body(cls, body: bytes) -> LegacyPacket:
        fixed = cls._struct.size
        if cls._tail_capacity:
            if len(body) < fixed + 1:
                raise ProtocolError(f"{cls.__name__} body of {len(body)} bytes is too short")
        elif len(body) != fixed:
            raise ProtocolError(f"{cls.__name__} body must be {fixed} bytes, got {len(body)}")
        args = [
            _decode_text(value) if code == "s" else value
            for value, (_, code) in zip(cls._struct.unpack(body[:fixed]), cls._codes)
        ]
        if cls._tail_capacity:
            args.append(_decode_text(body[fixed:]))
        return cls(*args)

    def encode(self) -> bytes:
        """Return the full wire form of the packet, header included."""
        try:
            body = self._body()
        except struct.error as exc:
            raise ProtocolError(f"cannot encode {type(self).__name__}: {exc}") from exc
        size = HEADER_SIZE + len(body)
        if size > MAX_PACKET_SIZE:
            raise ProtocolError(f"{type(self).__name__} of {size} bytes exceeds {MAX_PACKET_SIZE}")
        return bytes((size, self.packet_type)) + body

    @classmethod
    def decode(cls, data: bytes) -> LegacyPacket:
        """Decode one packet of this type from the start of ``data``."""
        if cls is LegacyPacket:
            raise TypeError("decode through a concrete packet class")
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise ProtocolError("packet shorter than its header")
        size, packet_type = data[0], data[1]
        if packet_type != cls.packet_type:
            raise ProtocolError(
                f"packet type {packet_type} does not match {cls.__name__} ({cls.packet_type})"
            )
        if size < HEADER_SIZE:
            raise ProtocolError(f"packet size {size} is too small")
        if len(data) < size:
            raise ProtocolError(f"packet truncated: {len(data)} of {size} bytes")
        return cls._parse_body(data[HEADER_SIZE:size])


@dataclass
class AvatarInfo(LegacyPacket):
    packet_type = S2C_P_AVATAR_INFO
    _format = "qhhhhhi"

    entity_id: int
    x: int
    y: int
    max_hp: int
    hp: int
    level: int
    exp: int


@dataclass
class LegacyMove(LegacyPacket):
    packet_type = S2C_P_MOVE
    _format = "qhh"

    entity_id: int
    x: int
    y: int


@dataclass
class LegacyEnter(LegacyPacket):
    """An object came into view; ``o_type`` 0 is a player, others are NPCs."""

    packet_type = S2C_P_ENTER
    _format = f"q{MAX_ID_LENGTH}sbhh"

    entity_id: int
    name: str
    o_type: int
    x: int
    y: int


@dataclass
class LegacyLeave(LegacyPacket):
    packet_type = S2C_P_LEAVE
    _format = "q"

    entity_id: int


@dataclass
class LegacyChat(LegacyPacket):
    """Chat from an object; an id of -1 marks a system message."""

    packet_type = S2C_P_CHAT
    _format = "q"
    _tail_capacity = LEGACY_MAX_CHAT_LENGTH

    entity_id: int
    message: str


@dataclass
class StatChange(LegacyPacket):
    packet_type = S2C_P_STAT_CHANGE
    _format = "qhhi"

    entity_id: int
    hp: int
    level: int
    exp: int


@dataclass
class LegacyLoginFail(LegacyPacket):
    """Login refused: 0 unknown, 1 in use, 2 bad id, 3 server full."""

    packet_type = S2C_P_LOGIN_FAIL
    _format = "qb"

    entity_id: int
    reason: int


@dataclass
class LegacyLogin(LegacyPacket):
    packet_type = C2S_P_LOGIN
    _format = f"{MAX_ID_LENGTH}s"

    name: str


@dataclass
class LegacyMoveRequest(LegacyPacket):
    packet_type = C2S_P_MOVE
    _format = "b"

    direction: int


@dataclass
class LegacyAttack(LegacyPacket):
    packet_type = C2S_P_ATTACK


@dataclass
class LegacyChatRequest(LegacyPacket):
    packet_type = C2S_P_CHAT
    _tail_capacity = LEGACY_MAX_CHAT_LENGTH

    message: str


@dataclass
class LegacyTeleport(LegacyPacket):
    packet_type = C2S_P_TELEPORT


@dataclass
class KeyInput(LegacyPacket):
    packet_type = NP_CS_KEY_INPUT
    _format = "BB"

    user_id: int
    direction: int


@dataclass
class LoginUser(LegacyPacket):
    packet_type = NP_SC_LOGIN_USER
    _format = "BBB"

    user_id: int
    x: int
    y: int


@dataclass
class LogoutUser(LegacyPacket):
    packet_type = NP_SC_LOGOUT_USER
    _format = "B"

    user_id: int


@dataclass
class MoveUser(LegacyPacket):
    packet_type = NP_SC_MOVE_USER
    _format = "BBB"

    user_id: int
    x: int
    y: int