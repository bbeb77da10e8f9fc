"""Short-lived on-screen items: floating text and attack effects.

Lifetimes and elapsed times are counted in microseconds.
"""

from __future__ import annotations

import math

import pygame

from .defines import OBJECT_SIZE, TILE_SIZE, AttackDirection, AttackType
from .resources import font_registry, texture_registry

FONT_KEY = "neodot"

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

CHAT_LIFETIME = 2_000_000
ATTACK_DURATION = 500_000

DEFAULT_CHARACTER_SIZE = 12
DEFAULT_OUTLINE_THICKNESS = 0.2

# Attack kind -> (texture key, size in object sizes, faces a direction).
_ATTACK_SPECS: dict[int, tuple[str, int, bool]] = {
    AttackType.STANDARD: ("standard_atk", 3, False),
    AttackType.WARRIOR_S: ("warrior_s", 5, False),
    AttackType.ROGUE_S: ("rogue_s", 1, True),
    AttackType.SORCERER_S: ("sorcerer_s", 5, True),
    AttackType.FIXED_A: ("fixed_a", 5, False),
    AttackType.AGRO_A: ("agro_a", 3, False),
    AttackType.NEUT_A: ("neut_a", 3, False),
    AttackType.KNIGHT_A: ("knight_a", 3, False),
}

# Clockwise rotation in degrees, screen y pointing down.
_ROTATIONS: dict[int, float] = {
    AttackDirection.LEFT: 180.0,
    AttackDirection.RIGHT: 0.0,
    AttackDirection.UP: 270.0,
    AttackDirection.DOWN: 90.0,
}


def render_outlined_text(
    text: str,
    size: int,
    fill: tuple[int, int, int],
    outline: tuple[int, int, int],
    thickness: float,
) -> pygame.Surface:
    """Render text in the shared font with an outline of the given thickness."""
    font = font_registry().get(FONT_KEY).sized(size)
    face = font.render(text, True, fill)
    edge_width = math.ceil(thickness) if thickness > 0 else 0
    if not edge_width:
        return face
    edge = font.render(text, True, outline)
    width, height = face.get_size()
    result = pygame.Surface((width + 2 * edge_width, height + 2 * edge_width), pygame.SRCALPHA)
    for dx in (-edge_width, 0, edge_width):
        for dy in (-edge_width, 0, edge_width):
            if dx or dy:
                result.blit(edge, (edge_width + dx, edge_width + dy))
    result.blit(face, (edge_width, edge_width))
    return result


class FloatingText:
    """Text shown centred on a point until its lifetime runs out."""

    def __init__(self, text: str = "", lifetime: int = CHAT_LIFETIME) -> None:
        self.text = str(text)
        self.remaining = lifetime
        self.character_size = DEFAULT_CHARACTER_SIZE
        self.outline_thickness = DEFAULT_OUTLINE_THICKNESS
        self.color: tuple[int, int, int] = WHITE
        self.outline_color: tuple[int, int, int] = BLACK
        self.position: tuple[float, float] = (0.0, 0.0)

    def __lt__(self, other: FloatingText) -> bool:
        # Longer-lived text sorts first.
        if not isinstance(other, FloatingText):
            return NotImplemented
        return self.remaining > other.remaining

    def set_size(self, size: int, thickness: float) -> None:
        self.character_size = int(size)
        self.outline_thickness = float(thickness)

    def set_color(self, color: tuple[int, int, int]) -> None:
        self.color = tuple(color)

    def set_position(self, pos: tuple[float, float]) -> None:
        self.position = (float(pos[0]), float(pos[1]))

    def update(self, delta_time: int) -> None:
        self.remaining -= delta_time

    def expired(self) -> bool:
        return self.remaining <= 0

    def draw(self, surface: pygame.Surface, offset: tuple[float, float] = (0.0, 0.0)) -> None:
        """Draw centred on the position; ``offset`` is the camera's top-left."""
        label = render_outlined_text(
            self.text, self.character_size, self.color, self.outline_color, self.outline_thickness
        )
        center = (round(self.position[0] - offset[0]), round(self.position[1] - offset[1]))
        surface.blit(label, label.get_rect(center=center))


class AttackEffect:
    """The picture of an attack, shown for a while once activated."""

    def __init__(self) -> None:
        self.sprite_key: str | None = None
        self.size = OBJECT_SIZE
        self.directional = False
        self.rotation = 0.0
        self.position: tuple[float, float] = (0.0, 0.0)
        self.duration = ATTACK_DURATION
        self.remaining = 0
        self._texture: pygame.Surface | None = None

    def set_attack_type(self, atk_type: int) -> None:
        """Choose the picture, size and facing behaviour for an attack kind."""
        spec = _ATTACK_SPECS.get(int(atk_type))
        if spec is not None:
            key, multiple, directional = spec
            self._texture = texture_registry().get(key)
            self.sprite_key = key
            self.size = OBJECT_SIZE * multiple
            if directional:
                self.directional = True
        self.duration = ATTACK_DURATION

    def activate(
        self, pos: tuple[int, int], direction: int = AttackDirection.NONE
    ) -> None:
        """Show the attack centred on tile ``pos``, facing ``direction`` if it turns."""
        if self.directional and int(direction) in _ROTATIONS:
            self.rotation = _ROTATIONS[int(direction)]
        self.position = (pos[0] * TILE_SIZE + TILE_SIZE / 2, pos[1] * TILE_SIZE + TILE_SIZE / 2)
        self.remaining = self.duration

    def update(self, delta_time: int) -> None:
        self.remaining -= delta_time

    def valid(self) -> bool:
        return self.remaining > 0

    def draw(self, surface: pygame.Surface, offset: tuple[float, float] = (0.0, 0.0)) -> None:
        """Draw while active; directional attacks extend from the position outwards."""
        if not self.valid() or self._texture is None:
            return
        side = max(1, round(self.size))
        image = pygame.transform.scale(self._texture, (side, side))
        cx = self.position[0] - offset[0]
        cy = self.position[1] - offset[1]
        if self.directional:
            angle = math.radians(self.rotation)
            cx += side / 2 * math.cos(angle)
            cy += side / 2 * math.sin(angle)
        if self.rotation:
            image = pygame.transform.rotate(image, -self.rotation)
        surface.blit(image, image.get_rect(center=(round(cx), round(cy))))