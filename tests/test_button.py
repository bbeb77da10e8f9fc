from pathlib import Path

import pygame

from mmoclient.button import Button
from mmoclient.resources import font_registry


def _texture(color=(255, 0, 0)):
    surface = pygame.Surface((10, 10))
    surface.fill(color)
    return surface


def test_button_id():
    assert Button(1).button_id == 1
    assert Button().button_id == 0


def test_set_size_without_texture_does_nothing():
    button = Button()
    before = button.character_size
    button.set_size(200)
    assert button.character_size == before
    assert button.sprite_size is None


def test_set_size_scales_image_and_text():
    button = Button()
    button.set_texture(_texture())
    button.set_size(200)
    assert button.sprite_size == (200, 200)
    assert button.character_size == 20


def test_draw_centres_scaled_image():
    button = Button()
    button.set_texture(_texture())
    button.set_size(100)
    button.set_position((200, 200))
    surface = pygame.Surface((400, 400))
    button.draw(surface)
    assert surface.get_at((200, 200))[:3] == (255, 0, 0)
    assert surface.get_at((245, 200))[:3] == (255, 0, 0)
    assert surface.get_at((260, 200))[:3] == (0, 0, 0)
    assert surface.get_at((200, 140))[:3] == (0, 0, 0)


def test_draw_text_around_position():
    path = Path(pygame.__file__).parent / pygame.font.get_default_font()
    font_registry().load("neodot", str(path))
    button = Button()
    button.set_text("Start")
    button.set_position((100, 50))
    surface = pygame.Surface((200, 100), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    button.draw(surface)
    drawn = surface.get_bounding_rect()
    assert drawn.width > 0
    assert drawn.collidepoint(100, 50)