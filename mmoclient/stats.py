"""Character statistics and experience curve."""

from __future__ import annotations

from dataclasses import dataclass, fields

from .defines import UINT16_MAX, UINT64_MAX

MAX_LEVEL = 50
MAX_EXP = 100 * (1 << 50)


def _u16(value: int) -> int:
    return value & UINT16_MAX


@dataclass
class BaseStats:
    """Stats carried by every character and piece of equipment (16-bit each)."""

    hp: int = 0
    atk: int = 0
    defense: int = 0
    strength: int = 0
    intelligence: int = 0
    dexterity: int = 0
    critical: int = 0
    movement: int = 0

    def __add__(self, other: BaseStats) -> BaseStats:
        if not isinstance(other, BaseStats):
            return NotImplemented
        return BaseStats(
            *(_u16(getattr(self, f.name) + getattr(other, f.name)) for f in fields(self))
        )

    def __iadd__(self, other: BaseStats) -> BaseStats:
        if not isinstance(other, BaseStats):
            return NotImplemented
        for f in fields(self):
            setattr(self, f.name, _u16(getattr(self, f.name) + getattr(other, f.name)))
        return self


Stats = BaseStats


def basic_stats(level: int) -> BaseStats:
    """Return the base stats of a character at the given level."""
    return BaseStats(
        _u16(100 * level),
        _u16(50 * level),
        _u16(level),
        _u16(20 * level),
        _u16(20 * level),
        _u16(20 * level),
        _u16(level),
        _u16(2 * level),
    )


def need_exp_to_level_up(level: int) -> int:
    """Experience needed to leave the given level; unbounded at the level cap."""
    if level >= MAX_LEVEL:
        return UINT64_MAX
    return 100 * (1 << level)