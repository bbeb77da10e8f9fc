"""The in-game screen: the map, every visible creature, and the HUD over them.

The scene talks to its game through a small interface: the attributes
``my_id`` (0 until logged in), ``name`` and ``developer``, and the methods
``send_move``, ``send_attack``, ``send_interaction``, ``send_respawn``,
``send_chat``, ``send_set_base_pos`` and ``handle_chat_command``.
"""

from __future__ import annotations

import logging
import struct
import time
from collections.abc import Callable

import pygame

from .creature import Creature
from .defines import (
    AATK_COOLTIME,
    DATK_COOLTIME,
    EXP_HEIGHT,
    MOVE_COOLTIME,
    SATK_COOLTIME,
    TILE_SIZE,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    AttackDirection,
    KeyType,
    Move,
)
from .mapfile import TileSet, TileType, WorldMap
from .protocol import PacketId, ProtocolError, split_packets
from .resources import texture_registry
from .scenes import Scene
from .stats import BaseStats, need_exp_to_level_up
from .timed import BLACK, WHITE, render_outlined_text
from .widgets import ChatBox, Dialog

_log = logging.getLogger(__name__)

MAX_NAME_LEN = 20

SELF_DAMAGE_COLOR = (145, 101, 226)
STATS_COLOR = (0, 0, 255)
EXP_BG_COLOR = (55, 55, 55)
EXP_FG_COLOR = (255, 255, 0)
DEAD_TEXT = "You Died Respawn To 'R'"
STATS_OFFSET = 60

_TILE_TEXTURES = {
    TileType.GRASS: "grass",
    TileType.WATER: "water",
    TileType.HOUSE: "house",
    TileType.TREE: "tree",
}

_LOGIN_ALLOW = struct.Struct("<QhhHHBBIQ")
_MOVE_SELF = struct.Struct("<hhQ")
_DAMAGE_COUNT = struct.Struct("<I")
_DAMAGE_INFO = struct.Struct("<QH")
_STATS = struct.Struct("<8H")
_EXP = struct.Struct("<Q")
_MOVE = struct.Struct("<Qhh")
_ENTER = struct.Struct(f"<Qhh{MAX_NAME_LEN}sHHBBB")
_ID = struct.Struct("<Q")
_ATTACK = struct.Struct("<QBB")
_VISUAL = struct.Struct("<QB")
_HP = struct.Struct("<QH")
_LEVEL = struct.Struct("<QI")

_MOVE_KEYS = {
    pygame.K_LEFT: (AttackDirection.LEFT, Move.LEFT),
    pygame.K_RIGHT: (AttackDirection.RIGHT, Move.RIGHT),
    pygame.K_UP: (AttackDirection.UP, Move.UP),
    pygame.K_DOWN: (AttackDirection.DOWN, Move.DOWN),
}

_FACING_KEYS = {
    pygame.K_KP4: AttackDirection.LEFT,
    pygame.K_KP6: AttackDirection.RIGHT,
    pygame.K_KP8: AttackDirection.UP,
    pygame.K_KP2: AttackDirection.DOWN,
}

_ATTACK_KEYS = {
    pygame.K_a: (KeyType.A, AATK_COOLTIME),
    pygame.K_s: (KeyType.S, SATK_COOLTIME),
    pygame.K_d: (KeyType.D, DATK_COOLTIME),
}


def _unpack(layout: struct.Struct, body: bytes, what: str) -> tuple:
    if len(body) < layout.size:
        raise ProtocolError(f"{what} packet body of {len(body)} bytes is too short")
    return layout.unpack_from(body)


def _text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


class GameScene(Scene):
    """The world around the player, other creatures, chat, dialog and HUD."""

    def __init__(self, game, world: WorldMap) -> None:
        self._game = game
        self.world = world
        self.client_player: Creature | None = None
        self.others: dict[int, Creature] = {}
        self.alive = True
        self.direction = AttackDirection.LEFT
        self.stats = BaseStats()
        self.exp = 0
        self.coordinate_text = ""
        self.chat_box = ChatBox(game)
        self.dialog = Dialog(game)
        self._tiles: TileSet | None = None

        now = time.monotonic()
        self._last_move = now - MOVE_COOLTIME
        self._last_attack = {
            KeyType.A: now - AATK_COOLTIME,
            KeyType.S: now - SATK_COOLTIME,
            KeyType.D: now - DATK_COOLTIME,
        }

        self._handlers: dict[int, Callable[[bytes], None]] = {
            PacketId.S2C_LOGIN_ALLOW: self._on_login_allow,
            PacketId.S2C_STATS_CHANGE: self._on_stats_change,
            PacketId.S2C_DAMAGE: self._on_damage,
            PacketId.S2C_DEAD: self._on_dead,
            PacketId.S2C_REVIVE: self._on_revive,
            PacketId.S2C_DIALOG: self._on_dialog,
            PacketId.S2C_ENTER: self._on_enter,
            PacketId.S2C_LEAVE: self._on_leave,
            PacketId.S2C_MOVE_SELF: self._on_move_self,
            PacketId.S2C_MOVE: self._on_move,
            PacketId.S2C_CHAT: self._on_chat,
            PacketId.S2C_ATTACK: self._on_attack,
            PacketId.S2C_UPDATE_VI: self._on_update_visual,
            PacketId.S2C_HP_CHANGE: self._on_hp_change,
            PacketId.S2C_LEVEL_CHANGE: self._on_level_change,
            PacketId.S2C_EXP_UP: self._on_exp_up,
        }

    # ------------------------------------------------------------------ state

    @property
    def stats_text(self) -> str:
        s = self.stats
        return (
            f"ATK: {s.atk} DEF: {s.defense} STR: {s.strength} DEX: {s.dexterity} "
            f"INT: {s.intelligence} CRT: {s.critical} MOV: {s.movement}"
        )

    @property
    def exp_ratio(self) -> float:
        """Share of the experience needed for the next level already gained."""
        level = self.client_player.level if self.client_player is not None else 1
        return self.exp / need_exp_to_level_up(level)

    def _creature(self, entity_id: int) -> Creature | None:
        if self.client_player is not None and entity_id == self._game.my_id:
            return self.client_player
        return self.others.get(entity_id)

    # --------------------------------------------------------------- per frame

    def update(self, delta_time: int) -> None:
        if self.client_player is None:
            return
        x, y = self.client_player.position
        self.coordinate_text = f"({x}, {y})"
        self.client_player.update(delta_time)
        for creature in self.others.values():
            creature.update(delta_time)

    def camera_center(self) -> tuple[float, float]:
        if self.client_player is None:
            return super().camera_center()
        x, y = self.client_player.position
        offset = self.client_player.offset()
        return x * TILE_SIZE + offset, y * TILE_SIZE + offset

    def _camera(self) -> tuple[float, float]:
        cx, cy = self.camera_center()
        return cx - WINDOW_WIDTH / 2, cy - WINDOW_HEIGHT / 2

    def _tile_set(self) -> TileSet:
        if self._tiles is None:
            tiles = TileSet()
            registry = texture_registry()
            for tile_type, key in _TILE_TEXTURES.items():
                tiles.add_tile(tile_type, registry.get(key))
            self._tiles = tiles
        return self._tiles

    def draw(self, surface: pygame.Surface) -> None:
        if self.client_player is None:
            return
        camera = self._camera()
        self.world.draw(surface, self._tile_set(), self.client_player.position, camera)
        for creature in self.others.values():
            creature.draw(surface, camera)
        self.client_player.draw(surface, camera)

    def hud(self, surface: pygame.Surface) -> None:
        if self.coordinate_text:
            label = render_outlined_text(self.coordinate_text, 20, WHITE, BLACK, 1.0)
            surface.blit(label, (10, 10))

        self.chat_box.draw(surface)
        self.dialog.draw(surface)

        if not self.alive:
            shade = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
            shade.fill((0, 0, 0, 128))
            surface.blit(shade, (0, 0))
            label = render_outlined_text(DEAD_TEXT, 50, BLACK, WHITE, 1.0)
            surface.blit(label, label.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2)))

        label = render_outlined_text(self.stats_text, 20, STATS_COLOR, WHITE, 0.2)
        surface.blit(label, label.get_rect(center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT - STATS_OFFSET)))

        bar_top = round(WINDOW_HEIGHT - EXP_HEIGHT)
        bar_height = round(EXP_HEIGHT)
        pygame.draw.rect(surface, EXP_BG_COLOR, pygame.Rect(0, bar_top, WINDOW_WIDTH, bar_height))
        fill = round(WINDOW_WIDTH * max(0.0, min(1.0, self.exp_ratio)))
        if fill > 0:
            pygame.draw.rect(surface, EXP_FG_COLOR, pygame.Rect(0, bar_top, fill, bar_height))

    # ------------------------------------------------------------------- input

    def handle_input(self, event: pygame.event.Event) -> None:
        now = time.monotonic()

        self.chat_box.handle_input(event)
        if self.chat_box.active:
            return
        self.dialog.handle_input(event)
        if self.dialog.active:
            return
        if event.type != pygame.KEYDOWN:
            return

        if not self.alive:
            if event.key == pygame.K_r:
                self._game.send_respawn()
            return

        developer = bool(self._game.developer)
        key = event.key
        if key in _MOVE_KEYS:
            self.direction, move = _MOVE_KEYS[key]
            if not developer and now - self._last_move < MOVE_COOLTIME:
                return
            self._last_move = now
            self._game.send_move(move)
        elif key in _ATTACK_KEYS:
            atk_key, cooltime = _ATTACK_KEYS[key]
            if not developer and now - self._last_attack[atk_key] < cooltime:
                return
            self._last_attack[atk_key] = now
            self._game.send_attack(atk_key, self.direction)
        elif key in _FACING_KEYS:
            self.direction = _FACING_KEYS[key]
        elif key == pygame.K_e:
            self._game.send_interaction()

    # ----------------------------------------------------------------- packets

    def process_packets(self, data: bytes) -> None:
        for packet in split_packets(data):
            handler = self._handlers.get(packet[1])
            if handler is None:
                _log.error("game scene received unknown packet %d", packet[1])
                continue
            handler(bytes(packet[2:]))

    def _player_or_skip(self, what: str) -> Creature | None:
        if self.client_player is None:
            _log.warning("%s packet arrived before login", what)
        return self.client_player

    def _on_login_allow(self, body: bytes) -> None:
        entity_id, x, y, max_hp, hp, visual, class_type, level, exp = _unpack(
            _LOGIN_ALLOW, body, "login allow"
        )
        if self._game.my_id != 0:
            raise ProtocolError("login allowed a second time")
        self._game.my_id = entity_id
        player = Creature(self.world, entity_id)
        player.move(x, y)
        player.set_visual_info(visual)
        player.set_name(self._game.name)
        player.set_class_type(class_type)
        player.set_max_hp(max_hp)
        player.change_hp(hp)
        player.set_level(level)
        player.damage_color = SELF_DAMAGE_COLOR
        self.client_player = player
        self.exp = exp

    def _on_stats_change(self, body: bytes) -> None:
        self.stats = BaseStats(*_unpack(_STATS, body, "stats change"))
        player = self._player_or_skip("stats change")
        if player is not None:
            player.set_max_hp(self.stats.hp)

    def _on_damage(self, body: bytes) -> None:
        (count,) = _unpack(_DAMAGE_COUNT, body, "damage")
        needed = _DAMAGE_COUNT.size + count * _DAMAGE_INFO.size
        if len(body) < needed:
            raise ProtocolError(f"damage packet holds fewer than {count} entries")
        for entity_id, damage in _DAMAGE_INFO.iter_unpack(body[_DAMAGE_COUNT.size:needed]):
            creature = self.others.get(entity_id)
            if creature is not None:
                creature.add_damage(damage)

    def _on_dead(self, body: bytes) -> None:
        self.alive = False

    def _on_revive(self, body: bytes) -> None:
        self.alive = True

    def _on_dialog(self, body: bytes) -> None:
        self.dialog.active = True

    def _on_enter(self, body: bytes) -> None:
        entity_id, x, y, name, max_hp, hp, visual, class_type, level = _unpack(_ENTER, body, "enter")
        creature = self.others.get(entity_id)
        if creature is None:
            creature = Creature(self.world, entity_id)
            self.others[entity_id] = creature
        creature.move(x, y)
        creature.set_visual_info(visual)
        creature.set_name(_text(name))
        creature.set_class_type(class_type)
        creature.set_max_hp(max_hp)
        creature.change_hp(hp)
        creature.set_level(level)

    def _on_leave(self, body: bytes) -> None:
        (entity_id,) = _unpack(_ID, body, "leave")
        self.others.pop(entity_id, None)

    def _on_move_self(self, body: bytes) -> None:
        x, y, _move_time = _unpack(_MOVE_SELF, body, "move self")
        player = self._player_or_skip("move self")
        if player is not None:
            player.move(x, y)

    def _on_move(self, body: bytes) -> None:
        entity_id, x, y = _unpack(_MOVE, body, "move")
        creature = self.others.get(entity_id)
        if creature is not None:
            creature.move(x, y)

    def _on_chat(self, body: bytes) -> None:
        (entity_id,) = _unpack(_ID, body, "chat")
        message = _text(body[_ID.size:])
        creature = self._creature(entity_id)
        if creature is None:
            return
        creature.add_chat(message)
        self.chat_box.add_message(f"{creature.name}: {message}")

    def _on_attack(self, body: bytes) -> None:
        entity_id, atk_key, atk_dir = _unpack(_ATTACK, body, "attack")
        creature = self._creature(entity_id)
        if creature is not None:
            creature.show_attack(atk_key, atk_dir)

    def _on_update_visual(self, body: bytes) -> None:
        entity_id, visual = _unpack(_VISUAL, body, "visual update")
        creature = self._creature(entity_id)
        if creature is not None:
            creature.set_visual_info(visual)

    def _on_hp_change(self, body: bytes) -> None:
        entity_id, hp = _unpack(_HP, body, "hp change")
        creature = self._creature(entity_id)
        if creature is None:
            return
        if creature is self.client_player:
            if creature.hp > hp:
                creature.add_damage(creature.hp - hp)
            else:
                creature.add_damage(hp - creature.hp, heal=True)
        creature.change_hp(hp)

    def _on_level_change(self, body: bytes) -> None:
        entity_id, level = _unpack(_LEVEL, body, "level change")
        creature = self._creature(entity_id)
        if creature is not None:
            creature.set_level(level)

    def _on_exp_up(self, body: bytes) -> None:
        (self.exp,) = _unpack(_EXP, body, "exp up")