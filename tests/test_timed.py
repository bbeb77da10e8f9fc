import pygame
import pytest

from mmoclient.defines import OBJECT_SIZE, TILE_SIZE, AttackDirection, AttackType
from mmoclient.resources import font_registry, texture_registry
from mmoclient.timed import (
    ATTACK_DURATION,
    CHAT_LIFETIME,
    AttackEffect,
    FloatingText,
)

TEXTURE_COLOR = (200, 10, 10)
ATTACK_KEYS = [
    "standard_atk", "warrior_s", "rogue_s", "sorcerer_s",
    "fixed_a", "agro_a", "neut_a", "knight_a",
]


@pytest.fixture(scope="module", autouse=True)
def textures(tmp_path_factory):
    folder = tmp_path_factory.mktemp("textures")
    registry = texture_registry()
    for key in ATTACK_KEYS:
        image = pygame.Surface((8, 4))
        image.fill(TEXTURE_COLOR)
        path = folder / f"{key}.bmp"
        pygame.image.save(image, str(path))
        registry.load(key, str(path))
    return registry


@pytest.fixture
def font():
    font_registry().load("neodot", None)
    return font_registry().get("neodot")


def test_floating_text_defaults_to_chat_lifetime():
    text = FloatingText()
    assert text.remaining == CHAT_LIFETIME
    assert text.text == ""
    assert not text.expired()


def test_floating_text_expires_when_lifetime_used():
    text = FloatingText("hi", 2000000)
    text.update(1999999)
    assert not text.expired()
    text.update(1)
    assert text.expired()


def test_floating_text_orders_longest_lived_first():
    short = FloatingText("a", 10)
    long = FloatingText("b", 1000)
    middle = FloatingText("c", 100)
    assert [t.text for t in sorted([short, long, middle])] == ["b", "c", "a"]


def test_floating_text_size_color_position():
    text = FloatingText("x", 5)
    text.set_size(20, 0.3)
    text.set_color((0, 255, 0))
    text.set_position((3, 4))
    assert (text.character_size, text.outline_thickness) == (20, 0.3)
    assert text.color == (0, 255, 0)
    assert text.position == (3.0, 4.0)


def test_floating_text_draws_something(font):
    surface = pygame.Surface((100, 100))
    text = FloatingText("88", 100)
    text.set_size(30, 1.0)
    text.set_position((50, 50))
    text.draw(surface)
    assert not text.expired()
    assert text.character_size == 30
    assert any(
        tuple(surface.get_at((x, y)))[:3] != (0, 0, 0)
        for x in range(20, 80)
        for y in range(30, 70)
    )


def test_attack_effect_starts_inactive():
    effect = AttackEffect()
    assert not effect.valid()
    assert effect.duration == ATTACK_DURATION


@pytest.mark.parametrize(
    "atk_type, key, multiple, directional",
    [
        (AttackType.STANDARD, "standard_atk", 3, False),
        (AttackType.WARRIOR_S, "warrior_s", 5, False),
        (AttackType.ROGUE_S, "rogue_s", 1, True),
        (AttackType.SORCERER_S, "sorcerer_s", 5, True),
        (AttackType.FIXED_A, "fixed_a", 5, False),
        (AttackType.AGRO_A, "agro_a", 3, False),
        (AttackType.NEUT_A, "neut_a", 3, False),
        (AttackType.KNIGHT_A, "knight_a", 3, False),
    ],
)
def test_attack_type_sets_sprite_and_size(atk_type, key, multiple, directional):
    effect = AttackEffect()
    effect.set_attack_type(atk_type)
    assert effect.sprite_key == key
    assert effect.size == OBJECT_SIZE * multiple
    assert effect.directional is directional


def test_activate_centres_on_tile_and_lasts_duration():
    effect = AttackEffect()
    effect.set_attack_type(AttackType.STANDARD)
    effect.activate((2, 3))
    assert effect.position == (2 * TILE_SIZE + TILE_SIZE / 2, 3 * TILE_SIZE + TILE_SIZE / 2)
    assert effect.valid()
    effect.update(ATTACK_DURATION - 1)
    assert effect.valid()
    effect.update(1)
    assert not effect.valid()


@pytest.mark.parametrize(
    "direction, rotation",
    [
        (AttackDirection.LEFT, 180.0),
        (AttackDirection.RIGHT, 0.0),
        (AttackDirection.UP, 270.0),
        (AttackDirection.DOWN, 90.0),
    ],
)
def test_directional_attack_rotates(direction, rotation):
    effect = AttackEffect()
    effect.set_attack_type(AttackType.ROGUE_S)
    effect.activate((0, 0), direction)
    assert effect.rotation == rotation


def test_non_directional_attack_ignores_direction():
    effect = AttackEffect()
    effect.set_attack_type(AttackType.STANDARD)
    effect.activate((0, 0), AttackDirection.LEFT)
    assert effect.rotation == 0.0


def test_unknown_attack_type_has_no_sprite_but_still_times():
    effect = AttackEffect()
    effect.set_attack_type(AttackType.NONE)
    effect.activate((1, 1))
    assert effect.sprite_key is None
    assert effect.valid()
    surface = pygame.Surface((200, 200))
    effect.draw(surface)
    assert tuple(surface.get_at((60, 60)))[:3] == (0, 0, 0)


def test_active_attack_is_drawn_and_expired_is_not():
    effect = AttackEffect()
    effect.set_attack_type(AttackType.STANDARD)
    effect.activate((2, 2))
    center = (int(effect.position[0]), int(effect.position[1]))

    surface = pygame.Surface((300, 300))
    effect.draw(surface)
    assert tuple(surface.get_at(center))[:3] == TEXTURE_COLOR

    effect.update(ATTACK_DURATION)
    cleared = pygame.Surface((300, 300))
    effect.draw(cleared)
    assert tuple(cleared.get_at(center))[:3] == (0, 0, 0)


def test_draw_respects_camera_offset():
    effect = AttackEffect()
    effect.set_attack_type(AttackType.STANDARD)
    effect.activate((3, 3))
    surface = pygame.Surface((300, 300))
    effect.draw(surface, (TILE_SIZE, TILE_SIZE))
    point = (int(effect.position[0] - TILE_SIZE), int(effect.position[1] - TILE_SIZE))
    assert tuple(surface.get_at(point))[:3] == TEXTURE_COLOR