"""A menu button: a scaled image with centred, outlined text."""

from __future__ import annotations

import pygame

from .resources import font_registry

FONT_KEY = "neodot"
DEFAULT_CHARACTER_SIZE = 30
TEXT_COLOR = (255, 255, 255)
OUTLINE_COLOR = (0, 0, 0)
OUTLINE_THICKNESS = 2


def _render_outlined(font, text, fill, outline, thickness) -> pygame.Surface:
    face = font.render(text, True, fill)
    edge = font.render(text, True, outline)
    width, height = face.get_size()
    result = pygame.Surface((width + 2 * thickness, height + 2 * thickness), pygame.SRCALPHA)
    for dx in (-thickness, 0, thickness):
        for dy in (-thickness, 0, thickness):
            if dx or dy:
                result.blit(edge, (thickness + dx, thickness + dy))
    result.blit(face, (thickness, thickness))
    return result


class Button:
    """A selectable button identified by ``button_id``."""

    def __init__(self, button_id: int = 0) -> None:
        self.button_id = button_id
        self.text = ""
        self.character_size = DEFAULT_CHARACTER_SIZE
        self.position: tuple[float, float] = (0.0, 0.0)
        self._texture: pygame.Surface | None = None
        self._scale = (1.0, 1.0)

    @property
    def sprite_size(self) -> tuple[int, int] | None:
        """Drawn size of the image, or None without a texture."""
        if self._texture is None:
            return None
        width, height = self._texture.get_size()
        return round(width * self._scale[0]), round(height * self._scale[1])

    def set_text(self, text: str) -> None:
        self.text = text

    def set_texture(self, texture: pygame.Surface) -> None:
        self._texture = texture

    def set_size(self, size: float) -> None:
        """Scale the image to a ``size`` square and the text to a tenth of it."""
        if self._texture is None:
            return
        width, height = self._texture.get_size()
        self._scale = (size / width, size / height)
        self.character_size = int(size / 10)

    def set_position(self, pos: tuple[float, float]) -> None:
        self.position = (float(pos[0]), float(pos[1]))

    def draw(self, surface: pygame.Surface) -> None:
        center = (round(self.position[0]), round(self.position[1]))
        size = self.sprite_size
        if self._texture is not None and size is not None:
            image = pygame.transform.scale(self._texture, size)
            surface.blit(image, image.get_rect(center=center))
        if self.text:
            font = font_registry().get(FONT_KEY).sized(self.character_size)
            label = _render_outlined(font, self.text, TEXT_COLOR, OUTLINE_COLOR, OUTLINE_THICKNESS)
            surface.blit(label, label.get_rect(center=center))