"""Screens of the client: title menu, login and character creation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import IntEnum

import pygame

from .button import Button
from .defines import BIG_BUTTON_SIZE, NAME_HEIGHT, NAME_WIDTH, WINDOW_HEIGHT, WINDOW_WIDTH, ClassType, LoginFailReason
from .protocol import LoginFail, PacketId, split_packets
from .resources import texture_registry
from .timed import BLACK, WHITE, render_outlined_text
from .widgets import edit_text

_log = logging.getLogger(__name__)

RED = (255, 0, 0)
YELLOW = (255, 255, 0)
_ENTER_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER)

TITLE_TEXT = "MMORPG"
MAX_NAME_INPUT = 20

_FAIL_MESSAGES = {
    LoginFailReason.NO_IDEA: "No Idea login fail",
    LoginFailReason.USED_ID: "that name is used",
    LoginFailReason.INAPPOSITE_ID: "invalid text",
    LoginFailReason.TO_MANY: "to many user in server",
}

CLASS_CHOICES = (ClassType.WARRIOR, ClassType.ROGUE, ClassType.SORCERER)
_PORTRAITS = ("warrior_big", "rogue_big", "sorcerer_big")
PORTRAIT_SIZE = 300


class SceneType(IntEnum):
    TITLE = 0
    LOGIN = 1
    CREATE = 2
    GAME = 3


class Scene(ABC):
    """One screen: it reacts to input and packets and draws itself."""

    def update(self, delta_time: int) -> None:
        """Advance time; nothing moves by default."""

    @abstractmethod
    def draw(self, surface: pygame.Surface) -> None:
        """Draw the world part of the scene."""

    def hud(self, surface: pygame.Surface) -> None:
        """Draw overlays fixed to the screen; none by default."""

    @abstractmethod
    def handle_input(self, event: pygame.event.Event) -> None:
        """React to one input event."""

    @abstractmethod
    def process_packets(self, data: bytes) -> None:
        """Handle a buffer of whole packets from the server."""

    def camera_center(self) -> tuple[float, float]:
        return WINDOW_WIDTH / 2, WINDOW_HEIGHT / 2


class TitleScene(Scene):
    """Start / Exit menu."""

    def __init__(self, game) -> None:
        self._game = game
        mid = WINDOW_WIDTH / 2
        self.start_button = Button(0)
        self.start_button.set_text("Start")
        self.start_button.set_position((mid, 400))
        self.exit_button = Button(1)
        self.exit_button.set_text("Exit")
        self.exit_button.set_position((mid, 600))
        self.button_index = 0
        self._button_count = 2
        self._textured = False

    @property
    def selector_center(self) -> tuple[float, float]:
        return WINDOW_WIDTH / 2, float(400 + 200 * self.button_index)

    def handle_input(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_UP:
            self.button_index = (self.button_index - 1) % self._button_count
        if event.key == pygame.K_DOWN:
            self.button_index = (self.button_index + 1) % self._button_count
        if event.key in _ENTER_KEYS:
            if self.start_button.button_id == self.button_index:
                self._game.load_scene(SceneType.LOGIN)
            elif self.exit_button.button_id == self.button_index:
                self._game.exit()
            else:
                _log.error("title scene selector points at no button")

    def process_packets(self, data: bytes) -> None:
        for packet in split_packets(data):
            _log.error("title scene received unexpected packet %d", packet[1])

    def draw(self, surface: pygame.Surface) -> None:
        if not self._textured:
            texture = texture_registry().get("button_big")
            for button in (self.start_button, self.exit_button):
                button.set_texture(texture)
                button.set_size(BIG_BUTTON_SIZE)
            self._textured = True
        title = render_outlined_text(TITLE_TEXT, 50, RED, WHITE, 3.0)
        surface.blit(title, title.get_rect(center=(WINDOW_WIDTH // 2, 200)))
        selector = pygame.Rect(0, 0, WINDOW_WIDTH, round(BIG_BUTTON_SIZE / 2))
        cx, cy = self.selector_center
        selector.center = (round(cx), round(cy))
        pygame.draw.rect(surface, YELLOW, selector)
        self.start_button.draw(surface)
        self.exit_button.draw(surface)


class LoginScene(Scene):
    """Name entry; the server either admits, refuses or asks to register."""

    def __init__(self, game) -> None:
        self._game = game
        self.input_text = ""
        self.message = ""

    def handle_input(self, event: pygame.event.Event) -> None:
        self.input_text = edit_text(self.input_text, event, MAX_NAME_INPUT)
        if event.type == pygame.KEYDOWN and event.key in _ENTER_KEYS and self.input_text:
            self._game.send_login(self.input_text)

    def process_packets(self, data: bytes) -> None:
        for packet in split_packets(data):
            packet_id = packet[1]
            if packet_id == PacketId.S2C_LOGIN_ALLOW:
                self._game.name = self.input_text
                self._game.load_scene(SceneType.GAME)
                self._game.process_packets(data)
                return
            if packet_id == PacketId.S2C_LOGIN_FAIL:
                reason = LoginFail.decode(packet).reason
                if reason == LoginFailReason.GO_REGISTER:
                    self._game.name = self.input_text
                    self._game.load_scene(SceneType.CREATE)
                elif reason in _FAIL_MESSAGES:
                    self.message = _FAIL_MESSAGES[reason]
            else:
                _log.error("login scene received unexpected packet %d", packet_id)

    def draw(self, surface: pygame.Surface) -> None:
        mid = WINDOW_WIDTH / 2
        left = mid - NAME_WIDTH / 2
        pygame.draw.rect(surface, WHITE, pygame.Rect(round(left), 400, round(NAME_WIDTH), round(NAME_HEIGHT)))
        if self.input_text:
            name = render_outlined_text(self.input_text, 24, BLACK, WHITE, 2.0)
            surface.blit(name, (round(left + 10), 400))
        if self.message:
            label = render_outlined_text(self.message, 40, RED, BLACK, 2.0)
            surface.blit(label, label.get_rect(center=(round(mid), 700)))


class CreateScene(Scene):
    """Choice of class for a new character."""

    def __init__(self, game) -> None:
        self._game = game
        self.button_index = 0
        self._portraits: list[pygame.Surface] | None = None

    @staticmethod
    def _column_center(index: int) -> tuple[float, float]:
        third = WINDOW_WIDTH / 3
        return index * third + third / 2, WINDOW_HEIGHT / 2

    @property
    def selector_center(self) -> tuple[float, float]:
        return self._column_center(self.button_index)

    def handle_input(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        count = len(CLASS_CHOICES)
        if event.key == pygame.K_LEFT:
            self.button_index = (self.button_index - 1) % count
        if event.key == pygame.K_RIGHT:
            self.button_index = (self.button_index + 1) % count
        if event.key in _ENTER_KEYS:
            self._game.send_register(CLASS_CHOICES[self.button_index])

    def process_packets(self, data: bytes) -> None:
        for packet in split_packets(data):
            packet_id = packet[1]
            if packet_id == PacketId.S2C_LOGIN_ALLOW:
                self._game.load_scene(SceneType.GAME)
                self._game.process_packets(data)
                return
            if packet_id == PacketId.S2C_LOGIN_FAIL:
                if LoginFail.decode(packet).reason == LoginFailReason.USED_ID:
                    self._game.load_scene(SceneType.LOGIN)
                else:
                    _log.warning("character registration failed for an unknown reason")
            else:
                _log.error("create scene received unexpected packet %d", packet_id)

    def draw(self, surface: pygame.Surface) -> None:
        if self._portraits is None:
            registry = texture_registry()
            self._portraits = [
                pygame.transform.scale(registry.get(key), (PORTRAIT_SIZE, PORTRAIT_SIZE))
                for key in _PORTRAITS
            ]
        width = WINDOW_WIDTH / 3 / 2
        selector = pygame.Rect(0, 0, round(width), WINDOW_HEIGHT)
        cx, cy = self.selector_center
        selector.center = (round(cx), round(cy))
        pygame.draw.rect(surface, WHITE, selector)
        for index, portrait in enumerate(self._portraits):
            x, y = self._column_center(index)
            surface.blit(portrait, portrait.get_rect(center=(round(x), round(y))))