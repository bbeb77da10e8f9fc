"""Binary wire protocol shared with the game server.

Every packet is little-endian and packed: one byte of total size, one byte
of packet id, then the body.
"""

from __future__ import annotations

import dataclasses
import re
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar

from .stats import BaseStats

MAX_NAME_LEN = 20
MAX_CHAT_LENGTH = 245
HEADER_SIZE = 2
MAX_DAMAGE_INFO_NUM = 20


class ProtocolError(ValueError):
    """Raised for packets that cannot be encoded or decoded."""


class PacketId(IntEnum):
    PACKET_START = 0

    S2C_LOGIN_ALLOW = 1
    S2C_LOGIN_FAIL = 2
    S2C_MOVE_SELF = 3
    S2C_DAMAGE = 4
    S2C_STATS_CHANGE = 5
    S2C_EXP_UP = 6
    S2C_DEAD = 7
    S2C_REVIVE = 8
    S2C_DIALOG = 9

    S2C_MOVE = 10
    S2C_ENTER = 11
    S2C_LEAVE = 12
    S2C_CHAT = 13
    S2C_ATTACK = 14
    S2C_UPDATE_VI = 15
    S2C_HP_CHANGE = 16
    S2C_LEVEL_CHANGE = 17

    C2S_LOGIN = 18
    C2S_REGISTER = 19
    C2S_MOVE = 20
    C2S_TELEPORT = 21
    C2S_CHAT = 22
    C2S_ATTACK = 23
    C2S_RESPAWN = 24
    C2S_INTERACTION = 25
    C2S_SET_BASE_POS = 26

    PACKET_END = 27


_REGISTRY: dict[int, type[BasePacket]] = {}
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


@dataclass(frozen=True)
class DamageInfo:
    entity_id: int
    damage: int


@dataclass
class BasePacket:
    """Common header handling; subclasses declare their body layout."""

    packet_id: ClassVar[PacketId]
    _format: ClassVar[str] = ""
    _struct: ClassVar[struct.Struct] = struct.Struct("<")
    _codes: ClassVar[tuple[tuple[int, str], ...]] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._struct = struct.Struct("<" + cls._format)
        cls._codes = tuple(
            (int(count) if count else 1, code) for count, code in _CODE.findall(cls._format)
        )
        if "packet_id" in cls.__dict__:
            _REGISTRY[int(cls.packet_id)] = cls

    def _values(self) -> list:
        values = []
        for f, (count, code) in zip(dataclasses.fields(self), self._codes):
            value = getattr(self, f.name)
            values.append(_encode_text(value, count) if code == "s" else value)
        return values

    @classmethod
    def _from_values(cls, values: tuple) -> BasePacket:
        args = [
            _decode_text(value) if code == "s" else value
            for value, (_, code) in zip(values, cls._codes)
        ]
        return cls(*args)

    def encode(self) -> bytes:
        """Return the full wire form of the packet, header included."""
        try:
            body = self._struct.pack(*self._values())
        except struct.error as exc:
            raise ProtocolError(f"cannot encode {type(self).__name__}: {exc}") from exc
        return bytes((HEADER_SIZE + len(body), int(self.packet_id))) + body

    @classmethod
    def decode(cls, data: bytes) -> BasePacket:
        """Decode one packet of this type from the start of ``data``."""
        if cls is BasePacket:
            return decode_packet(data)
        body = cls._check_header(data, HEADER_SIZE + cls._struct.size)
        return cls._from_values(cls._struct.unpack(body))

    @classmethod
    def _check_header(cls, data: bytes, expected_size: int | None) -> bytes:
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise ProtocolError("packet shorter than its header")
        size, packet_id = data[0], data[1]
        if packet_id != cls.packet_id:
            raise ProtocolError(
                f"packet id {packet_id} does not match {cls.__name__} ({int(cls.packet_id)})"
            )
        if expected_size is not None and size != expected_size:
            raise ProtocolError(
                f"{cls.__name__} must be {expected_size} bytes, header says {size}"
            )
        if len(data) < size:
            raise ProtocolError(f"packet truncated: {len(data)} of {size} bytes")
        return data[HEADER_SIZE:size]


@dataclass
class LoginAllow(BasePacket):
    packet_id = PacketId.S2C_LOGIN_ALLOW
    _format = "QhhHHBBIQ"

    entity_id: int
    x: int
    y: int
    max_hp: int
    hp: int
    visual_info: int
    class_type: int
    level: int
    exp: int


@dataclass
class LoginFail(BasePacket):
    packet_id = PacketId.S2C_LOGIN_FAIL
    _format = "b"

    reason: int


@dataclass
class MoveSelf(BasePacket):
    packet_id = PacketId.S2C_MOVE_SELF
    _format = "hhQ"

    x: int
    y: int
    move_time: int = 0


@dataclass
class Damage(BasePacket):
    """Damage dealt to up to ``MAX_DAMAGE_INFO_NUM`` targets."""

    packet_id = PacketId.S2C_DAMAGE
    _COUNT = struct.Struct("<I")
    _INFO = struct.Struct("<QH")

    infos: list[DamageInfo] = field(default_factory=list)

    @property
    def num(self) -> int:
        return len(self.infos)

    def add_damage_info(self, entity_id: int, damage: int) -> None:
        if len(self.infos) >= MAX_DAMAGE_INFO_NUM:
            raise ProtocolError(f"at most {MAX_DAMAGE_INFO_NUM} damage entries fit in a packet")
        self.infos.append(DamageInfo(entity_id, damage))

    def encode(self) -> bytes:
        if len(self.infos) > MAX_DAMAGE_INFO_NUM:
            raise ProtocolError(f"at most {MAX_DAMAGE_INFO_NUM} damage entries fit in a packet")
        try:
            body = self._COUNT.pack(len(self.infos)) + b"".join(
                self._INFO.pack(info.entity_id, info.damage) for info in self.infos
            )
        except struct.error as exc:
            raise ProtocolError(f"cannot encode Damage: {exc}") from exc
        return bytes((HEADER_SIZE + len(body), int(self.packet_id))) + body

    @classmethod
    def decode(cls, data: bytes) -> Damage:
        data = bytes(data)
        if len(data) < HEADER_SIZE + cls._COUNT.size:
            raise ProtocolError("damage packet truncated")
        (count,) = cls._COUNT.unpack_from(data, HEADER_SIZE)
        if count > MAX_DAMAGE_INFO_NUM:
            raise ProtocolError(f"damage packet claims {count} entries")
        expected = HEADER_SIZE + cls._COUNT.size + count * cls._INFO.size
        body = cls._check_header(data, expected)
        infos = [
            DamageInfo(*cls._INFO.unpack_from(body, cls._COUNT.size + i * cls._INFO.size))
            for i in range(count)
        ]
        return cls(infos)


@dataclass
class StatsChange(BasePacket):
    packet_id = PacketId.S2C_STATS_CHANGE
    _format = "8H"

    stats: BaseStats = field(default_factory=BaseStats)

    def _values(self) -> list:
        return list(dataclasses.astuple(self.stats))

    @classmethod
    def _from_values(cls, values: tuple) -> StatsChange:
        return cls(BaseStats(*values))


@dataclass
class ExpUp(BasePacket):
    packet_id = PacketId.S2C_EXP_UP
    _format = "Q"

    exp: int


@dataclass
class Dead(BasePacket):
    packet_id = PacketId.S2C_DEAD


@dataclass
class Revive(BasePacket):
    packet_id = PacketId.S2C_REVIVE


@dataclass
class DialogOpen(BasePacket):
    packet_id = PacketId.S2C_DIALOG


@dataclass
class MoveNotice(BasePacket):
    packet_id = PacketId.S2C_MOVE
    _format = "Qhh"

    entity_id: int
    x: int
    y: int


@dataclass
class Enter(BasePacket):
    packet_id = PacketId.S2C_ENTER
    _format = f"Qhh{MAX_NAME_LEN}sHHBBB"

    entity_id: int
    x: int
    y: int
    name: str
    max_hp: int
    hp: int
    visual_info: int
    class_type: int
    level: int


@dataclass
class Leave(BasePacket):
    packet_id = PacketId.S2C_LEAVE
    _format = "Q"

    entity_id: int


@dataclass
class ChatNotice(BasePacket):
    packet_id = PacketId.S2C_CHAT
    _format = f"Q{MAX_CHAT_LENGTH}s"

    entity_id: int
    message: str


@dataclass
class AttackNotice(BasePacket):
    packet_id = PacketId.S2C_ATTACK
    _format = "QBB"

    entity_id: int
    atk_key: int
    atk_dir: int


@dataclass
class UpdateVisual(BasePacket):
    packet_id = PacketId.S2C_UPDATE_VI
    _format = "QB"

    entity_id: int
    visual_info: int


@dataclass
class HpChange(BasePacket):
    packet_id = PacketId.S2C_HP_CHANGE
    _format = "QH"

    entity_id: int
    hp: int


@dataclass
class LevelChange(BasePacket):
    packet_id = PacketId.S2C_LEVEL_CHANGE
    _format = "QI"

    entity_id: int
    level: int


@dataclass
class LoginRequest(BasePacket):
    packet_id = PacketId.C2S_LOGIN
    _format = f"{MAX_NAME_LEN}s"

    name: str


@dataclass
class RegisterRequest(BasePacket):
    packet_id = PacketId.C2S_REGISTER
    _format = f"{MAX_NAME_LEN}sB"

    name: str
    class_type: int


@dataclass
class MoveRequest(BasePacket):
    packet_id = PacketId.C2S_MOVE
    _format = "BQ"

    direction: int
    move_time: int = 0


@dataclass
class ChatRequest(BasePacket):
    packet_id = PacketId.C2S_CHAT
    _format = f"{MAX_CHAT_LENGTH}s"

    message: str


@dataclass
class AttackRequest(BasePacket):
    packet_id = PacketId.C2S_ATTACK
    _format = "BB"

    atk_key: int
    atk_dir: int


@dataclass
class TeleportRequest(BasePacket):
    packet_id = PacketId.C2S_TELEPORT
    _format = "hh"

    x: int
    y: int


@dataclass
class RespawnRequest(BasePacket):
    packet_id = PacketId.C2S_RESPAWN


@dataclass
class InteractionRequest(BasePacket):
    packet_id = PacketId.C2S_INTERACTION


@dataclass
class SetBasePosRequest(BasePacket):
    packet_id = PacketId.C2S_SET_BASE_POS


def decode_packet(data: bytes) -> BasePacket:
    """Decode one packet of any known type from the start of ``data``."""
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise ProtocolError("packet shorter than its header")
    packet_type = _REGISTRY.get(data[1])
    if packet_type is None:
        raise ProtocolError(f"unknown packet id {data[1]}")
    return packet_type.decode(data)


def split_packets(data: bytes) -> Iterator[bytes]:
    """Yield each whole packet in a buffer of back-to-back packets."""
    buffer = bytes(data)
    offset = 0
    while offset < len(buffer):
        size = buffer[offset]
        if size < HEADER_SIZE:
            raise ProtocolError(f"packet size {size} at offset {offset} is too small")
        if offset + size > len(buffer):
            raise ProtocolError(f"packet at offset {offset} runs past the end of the buffer")
        yield buffer[offset:offset + size]
        offset += size