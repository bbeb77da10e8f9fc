"""Shared game constants and enumerations used by client and protocol."""

from enum import IntEnum

UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFF_FFFF
UINT64_MAX = 0xFFFF_FFFF_FFFF_FFFF

PORT_NUM = 8252
BUF_SIZE = 1024

MAX_USER = 10000
NUM_MONSTER = 200000

CACHE_LINE_SIZE = 64

MAX_WIDTH = 2000
MAX_HEIGHT = 2000

INVALID_ID = UINT64_MAX

# Cooldowns and timings, in seconds.
GRACE_TIME = 0.1
MOVE_COOLTIME = 0.5
AATK_COOLTIME = 1.0
SATK_COOLTIME = 5.0
DATK_COOLTIME = 20.0

# Window and layout.
WINDOW_WIDTH = 1600
WINDOW_HEIGHT = 900

TILE_NUM = 20
TILE_LEN = TILE_NUM // 2
TILE_SIZE = 40.0

NAME_WIDTH = 600.0
NAME_HEIGHT = 40.0
BIG_BUTTON_SIZE = 300.0
PLAYER_SIZE = 35.0
OBJECT_SIZE = 40.0

HP_WIDTH = 40.0
HP_HEIGHT = 5.0

EXP_HEIGHT = 10.0

LOOPBACK_ADDRESS = "127.0.0.1"


class LoginFailReason(IntEnum):
    """Why the server refused a login."""

    NO_IDEA = 0
    USED_ID = 1
    INAPPOSITE_ID = 2
    TO_MANY = 3
    GO_REGISTER = 4


class Move(IntEnum):
    """Movement requests sent to the server."""

    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4


class ClassType(IntEnum):
    """Character, NPC and monster classes."""

    START = 0
    WARRIOR = 1
    ROGUE = 2
    SORCERER = 3
    TALK_NPC = 4
    QUEST_NPC = 5
    MERCHANT_NPC = 6
    AGRS_MERCHANT_NPC = 7
    KNIGHT_NPC = 8
    ACTION_NPC = 9
    SLIME_MONSTER = 10
    NEPENTHES_MONSTER = 11
    DOG_MONSTER = 12
    BEAR_MONSTER = 13
    NONE = 14
    BOT = 15
    END = 16


class VisualInfo(IntEnum):
    """Which sprite represents an entity."""

    START = 0
    WARRIOR = 1
    ROGUE = 2
    SORCERER = 3
    GRAVE = 4
    MONSTER = 5
    SLIME = 6
    NEPENTHES = 7
    DOG = 8
    BEAR = 9
    HELLO = 10
    KNIGHT = 11
    ACTION = 12
    END = 13


class KeyType(IntEnum):
    """Attack keys."""

    START = 0
    A = 1
    S = 2
    D = 3
    SPACE = 4
    END = 5


class AttackType(IntEnum):
    """Visual attack kinds."""

    NONE = 0
    STANDARD = 1
    WARRIOR_S = 2
    ROGUE_S = 3
    SORCERER_S = 4
    FIXED_A = 5
    AGRO_A = 6
    NEUT_A = 7
    KNIGHT_A = 8


class AttackDirection(IntEnum):
    """Direction an attack faces."""

    NONE = 0
    LEFT = 1
    RIGHT = 2
    UP = 3
    DOWN = 4