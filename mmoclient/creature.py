"""Objects placed on the tile map, and the creatures that fight on it."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING

import pygame

from .defines import (
    HP_HEIGHT,
    HP_WIDTH,
    OBJECT_SIZE,
    PLAYER_SIZE,
    TILE_SIZE,
    AttackType,
    ClassType,
    KeyType,
    VisualInfo,
)
from .resources import font_registry, texture_registry
from .timed import (
    ATTACK_DURATION,
    BLACK,
    CHAT_LIFETIME,
    FONT_KEY,
    WHITE,
    AttackEffect,
    FloatingText,
    render_outlined_text,
)

if TYPE_CHECKING:
    from .mapfile import WorldMap

RED = (255, 0, 0)
GREEN = (0, 255, 0)
YELLOW = (255, 255, 0)

NAME_CHARACTER_SIZE = 18
NAME_OUTLINE = 0.5
LEVEL_CHARACTER_SIZE = 24
LEVEL_OUTLINE = 0.1
LEVEL_GAP = 10.0

DAMAGE_LIFETIME = ATTACK_DURATION
DAMAGE_CHARACTER_SIZE = 20
DAMAGE_OUTLINE = 0.3

CHAT_SPACING = 10.0
DAMAGE_SPACING = 8.0
STACK_GAP = 5.0

_VISUAL_SPRITES: dict[int, str] = {
    VisualInfo.WARRIOR: "warrior",
    VisualInfo.ROGUE: "rogue",
    VisualInfo.SORCERER: "sorcerer",
    VisualInfo.GRAVE: "grave",
    VisualInfo.MONSTER: "monster",
    VisualInfo.SLIME: "slime",
    VisualInfo.NEPENTHES: "nepenthes",
    VisualInfo.DOG: "dog",
    VisualInfo.BEAR: "bear",
    VisualInfo.HELLO: "hello",
    VisualInfo.KNIGHT: "knight",
    VisualInfo.ACTION: "action",
}

# Class -> (attack on A, attack on S or None).
_CLASS_ATTACKS: dict[int, tuple[AttackType, AttackType | None]] = {
    ClassType.WARRIOR: (AttackType.STANDARD, AttackType.WARRIOR_S),
    ClassType.ROGUE: (AttackType.STANDARD, AttackType.ROGUE_S),
    ClassType.SORCERER: (AttackType.STANDARD, AttackType.SORCERER_S),
    ClassType.NEPENTHES_MONSTER: (AttackType.FIXED_A, None),
    ClassType.DOG_MONSTER: (AttackType.AGRO_A, None),
    ClassType.BEAR_MONSTER: (AttackType.NEUT_A, None),
    ClassType.KNIGHT_NPC: (AttackType.KNIGHT_A, None),
}


def sprite_for_visual(visual_info: int) -> str | None:
    """Texture key that shows a visual kind, or None for kinds without one."""
    return _VISUAL_SPRITES.get(int(visual_info))


class GameObject:
    """Something with a sprite and a name standing on a tile of a world map."""

    def __init__(self, world: WorldMap | None = None) -> None:
        self.showing = True
        self.active = True
        self.size = OBJECT_SIZE
        self.position: tuple[int, int] = (0, 0)
        self.name = ""
        self.sprite_key: str | None = None
        self._texture: pygame.Surface | None = None
        self._world = weakref.ref(world) if world is not None else None

    @property
    def world(self) -> WorldMap | None:
        return self._world() if self._world is not None else None

    def _inside(self, x: int, y: int) -> bool:
        world = self.world
        return world is not None and world.contains(x, y)

    def move(self, x: int, y: int) -> None:
        """Move to tile (x, y) if it lies inside the world."""
        if self._inside(x, y):
            self.position = (x, y)

    def force_move(self, x: int, y: int) -> None:
        """Move to tile (x, y) without checking the world."""
        self.position = (x, y)

    def shift(self, dx: int, dy: int) -> None:
        """Move by (dx, dy) tiles if the destination lies inside the world."""
        x, y = self.position[0] + dx, self.position[1] + dy
        if self._inside(x, y):
            self.position = (x, y)

    def show(self) -> None:
        self.showing = True

    def hide(self) -> None:
        self.showing = False

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def set_name(self, name: str) -> None:
        self.name = name

    def set_size(self, size: float) -> None:
        self.size = size

    def set_sprite(self, key: str | pygame.Surface) -> None:
        """Use a registered texture by key, or a surface directly."""
        if isinstance(key, str):
            self._texture = texture_registry().get(key)
            self.sprite_key = key
        else:
            self._texture = key
            self.sprite_key = None

    def offset(self) -> float:
        """Distance from a tile's corner to the sprite's corner, centring it."""
        return TILE_SIZE / 2 - self.size / 2

    def name_position(self) -> tuple[float, float]:
        """World-pixel point the name is centred on."""
        x, y = self.position
        return x * TILE_SIZE + TILE_SIZE / 2, y * TILE_SIZE - TILE_SIZE / 2 + 5.0

    def update(self, delta_time: int) -> None:
        """Plain objects have nothing that changes over time."""

    def draw(self, surface: pygame.Surface, camera: tuple[float, float] = (0.0, 0.0)) -> None:
        """Draw sprite and name; ``camera`` is the view's top-left in world pixels."""
        if not self.showing:
            return
        if self._texture is not None:
            side = max(1, round(self.size))
            image = pygame.transform.scale(self._texture, (side, side))
            corner = self.offset()
            left = self.position[0] * TILE_SIZE + corner - camera[0]
            top = self.position[1] * TILE_SIZE + corner - camera[1]
            surface.blit(image, (round(left), round(top)))
        if self.name:
            label = render_outlined_text(self.name, NAME_CHARACTER_SIZE, WHITE, BLACK, NAME_OUTLINE)
            nx, ny = self.name_position()
            surface.blit(label, label.get_rect(center=(round(nx - camera[0]), round(ny - camera[1]))))


class Creature(GameObject):
    """A player, NPC or monster with health, level, attacks and floating text."""

    def __init__(self, world: WorldMap | None = None, creature_id: int = 0) -> None:
        super().__init__(world)
        self.creature_id = creature_id
        self.visual_info = int(VisualInfo.START)
        self.hp = 100
        self.max_hp = 100
        self.class_type = int(ClassType.NONE)
        self.a_attack = AttackEffect()
        self.s_attack = AttackEffect()
        self.d_attack = AttackEffect()
        self.chats: list[FloatingText] = []
        self.damages: list[FloatingText] = []
        self.damage_color: tuple[int, int, int] = RED
        self.level = 1
        self.set_size(PLAYER_SIZE)
        self.set_sprite("player")

    @property
    def attacks(self) -> tuple[AttackEffect, AttackEffect, AttackEffect]:
        return self.a_attack, self.s_attack, self.d_attack

    def update(self, delta_time: int) -> None:
        """Age attacks and floating text, dropping text that has expired."""
        for attack in self.attacks:
            attack.update(delta_time)
        for item in (*self.chats, *self.damages):
            item.update(delta_time)
        self.chats = [chat for chat in self.chats if not chat.expired()]
        self.damages = [damage for damage in self.damages if not damage.expired()]

    def set_visual_info(self, visual_info: int) -> None:
        self.visual_info = int(visual_info)
        key = sprite_for_visual(visual_info)
        if key is not None:
            self.set_sprite(key)

    def set_class_type(self, class_type: int) -> None:
        """Record the class and set up the attacks it shows."""
        self.class_type = int(class_type)
        attacks = _CLASS_ATTACKS.get(int(class_type))
        if attacks is None:
            return
        a_type, s_type = attacks
        self.a_attack.set_attack_type(a_type)
        if s_type is not None:
            self.s_attack.set_attack_type(s_type)

    def add_chat(self, text: str) -> None:
        self.chats.append(FloatingText(text, CHAT_LIFETIME))

    def add_damage(self, damage: int, heal: bool = False) -> None:
        """Float a damage number; healing is shown in green."""
        number = FloatingText(str(damage), DAMAGE_LIFETIME)
        number.set_size(DAMAGE_CHARACTER_SIZE, DAMAGE_OUTLINE)
        number.set_color(GREEN if heal else self.damage_color)
        self.damages.append(number)

    def show_attack(self, atk_key: int, atk_dir: int) -> None:
        """Start the attack bound to a key, facing ``atk_dir``."""
        attack = {
            KeyType.A: self.a_attack,
            KeyType.S: self.s_attack,
            KeyType.D: self.d_attack,
        }.get(int(atk_key))
        if attack is not None:
            attack.activate(self.position, atk_dir)

    def change_hp(self, hp: int) -> None:
        self.hp = hp

    def set_max_hp(self, max_hp: int) -> None:
        self.max_hp = max_hp

    def set_level(self, level: int) -> None:
        self.level = level

    def hp_ratio(self) -> float:
        """Share of health left, used for the health bar."""
        if self.max_hp == 0:
            return 0.0
        return self.hp / self.max_hp

    def draw(self, surface: pygame.Surface, camera: tuple[float, float] = (0.0, 0.0)) -> None:
        super().draw(surface, camera)
        self._draw_level(surface, camera)
        self._draw_hp(surface, camera)
        for attack in self.attacks:
            attack.draw(surface, camera)
        self._draw_stack(surface, camera, self.chats, CHAT_SPACING)
        self._draw_stack(surface, camera, self.damages, DAMAGE_SPACING)

    def _draw_level(self, surface: pygame.Surface, camera: tuple[float, float]) -> None:
        nx, ny = self.name_position()
        name_width = 0
        if self.name:
            name_width = font_registry().get(FONT_KEY).sized(NAME_CHARACTER_SIZE).size(self.name)[0]
        label = render_outlined_text(str(self.level), LEVEL_CHARACTER_SIZE, YELLOW, BLACK, LEVEL_OUTLINE)
        right = nx - name_width / 2 - LEVEL_GAP - camera[0]
        surface.blit(label, label.get_rect(midright=(round(right), round(ny - camera[1]))))

    def _draw_hp(self, surface: pygame.Surface, camera: tuple[float, float]) -> None:
        x, y = self.position
        left = x * TILE_SIZE + TILE_SIZE / 2 - HP_WIDTH / 2 - camera[0]
        top = y * TILE_SIZE + TILE_SIZE / 2 + PLAYER_SIZE / 2 - camera[1]
        height = round(HP_HEIGHT)
        pygame.draw.rect(surface, BLACK, pygame.Rect(round(left), round(top), round(HP_WIDTH), height))
        fill = round(HP_WIDTH * max(0.0, min(1.0, self.hp_ratio())))
        if fill > 0:
            pygame.draw.rect(surface, RED, pygame.Rect(round(left), round(top), fill, height))

    def _draw_stack(
        self,
        surface: pygame.Surface,
        camera: tuple[float, float],
        items: list[FloatingText],
        spacing: float,
    ) -> None:
        if not items:
            return
        x, y = self.position
        px = x * TILE_SIZE + TILE_SIZE / 2
        py = y * TILE_SIZE - TILE_SIZE / 2 - STACK_GAP - len(items) * spacing
        for item in items:
            item.set_position((px, py))
            py += spacing
            item.draw(surface, camera)