"""Chat box and yes/no dialog drawn over the game view."""

from __future__ import annotations

from collections import deque

import pygame

from .defines import WINDOW_HEIGHT, WINDOW_WIDTH
from .resources import font_registry
from .timed import BLACK, FONT_KEY, WHITE, render_outlined_text

MAX_INPUT_LENGTH = 80
MAX_MESSAGES = 10

CHAT_WIDTH = 800
CHAT_BOX_HEIGHT = 150
INPUT_HEIGHT = 30
CHAT_LINE_HEIGHT = 30
CHAT_CHARACTER_SIZE = 18
TEXT_MARGIN = 10

DIALOG_HEIGHT = 300
DIALOG_QUESTION = "Return Place?"
DIALOG_YES = "Yes"
DIALOG_NO = "No"
DIALOG_BUTTONS = 2
DIALOG_BUTTON_WIDTH = 300

_ENTER_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER)


def edit_text(buffer: str, event: pygame.event.Event, limit: int) -> str:
    """Apply typed printable ASCII text or a backspace to ``buffer``."""
    if event.type == pygame.TEXTINPUT:
        for char in event.text:
            if " " <= char <= "~" and len(buffer) < limit:
                buffer += char
    elif event.type == pygame.KEYDOWN and event.key == pygame.K_BACKSPACE and buffer:
        buffer = buffer[:-1]
    return buffer


def _translucent(size: tuple[int, int], color: tuple[int, int, int, int]) -> pygame.Surface:
    panel = pygame.Surface(size, pygame.SRCALPHA)
    panel.fill(color)
    return panel


class ChatBox:
    """Chat history and an input line, opened with T and sent with Enter."""

    def __init__(self, game) -> None:
        self._game = game
        self.active = False
        self.input_text = ""
        self._messages: deque[str] = deque(maxlen=MAX_MESSAGES)

    @property
    def messages(self) -> list[str]:
        """Shown messages, newest first."""
        return list(self._messages)

    @staticmethod
    def message_position(index: int) -> tuple[float, float]:
        """Top-left of the message ``index`` places back from the newest."""
        return float(TEXT_MARGIN), float(WINDOW_HEIGHT - INPUT_HEIGHT - CHAT_LINE_HEIGHT * (index + 1))

    def handle_input(self, event: pygame.event.Event) -> None:
        if self.active:
            self.input_text = edit_text(self.input_text, event, MAX_INPUT_LENGTH)
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_t:
                self.active = True
            if event.key in _ENTER_KEYS:
                self.submit()
            if event.key == pygame.K_ESCAPE:
                self.active = False

    def add_message(self, text: str) -> None:
        """Show a message on top; the oldest drops off past the limit."""
        self._messages.appendleft(text)

    def submit(self) -> None:
        """Close the box and run the typed line as a command or send it as chat."""
        self.active = False
        text = self.input_text
        if not text:
            return
        self.input_text = ""
        if self._game.handle_chat_command(text):
            return
        self._game.send_chat(text)

    def draw(self, surface: pygame.Surface) -> None:
        if not self.active:
            return
        surface.blit(
            _translucent((CHAT_WIDTH, CHAT_BOX_HEIGHT), (0, 0, 0, 128)),
            (0, WINDOW_HEIGHT - INPUT_HEIGHT - CHAT_BOX_HEIGHT),
        )
        surface.blit(
            _translucent((CHAT_WIDTH, INPUT_HEIGHT), (255, 255, 255, 200)),
            (0, WINDOW_HEIGHT - INPUT_HEIGHT),
        )
        font = font_registry().get(FONT_KEY).sized(CHAT_CHARACTER_SIZE)
        if self.input_text:
            surface.blit(
                font.render(self.input_text, True, BLACK),
                (TEXT_MARGIN, WINDOW_HEIGHT - INPUT_HEIGHT),
            )
        for index, message in enumerate(self._messages):
            if message:
                x, y = self.message_position(index)
                surface.blit(font.render(message, True, WHITE), (round(x), round(y)))


class Dialog:
    """Asks whether to make the current place the respawn point."""

    def __init__(self, game) -> None:
        self._game = game
        self.active = False
        self.button_index = 0

    @property
    def button_center(self) -> tuple[float, float]:
        """Centre of the highlight behind the selected answer."""
        return 400.0 + self.button_index * 800.0, WINDOW_HEIGHT - 75.0

    def handle_input(self, event: pygame.event.Event) -> None:
        if not self.active or event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_LEFT:
            self.button_index = (self.button_index - 1) % DIALOG_BUTTONS
        elif event.key == pygame.K_RIGHT:
            self.button_index = (self.button_index + 1) % DIALOG_BUTTONS
        elif event.key in _ENTER_KEYS:
            if self.button_index == 0:
                self._game.send_set_base_pos()
            self.active = False
        elif event.key == pygame.K_ESCAPE:
            self.active = False

    def draw(self, surface: pygame.Surface) -> None:
        if not self.active:
            return
        surface.blit(
            _translucent((WINDOW_WIDTH, DIALOG_HEIGHT), (0, 0, 0, 128)),
            (0, WINDOW_HEIGHT - DIALOG_HEIGHT),
        )
        question = render_outlined_text(DIALOG_QUESTION, 40, BLACK, WHITE, 1.0)
        yes = render_outlined_text(DIALOG_YES, 30, BLACK, WHITE, 1.0)
        no = render_outlined_text(DIALOG_NO, 30, BLACK, WHITE, 1.0)

        highlight = pygame.Rect(0, 0, DIALOG_BUTTON_WIDTH, round(no.get_height() * 1.5))
        cx, cy = self.button_center
        highlight.center = (round(cx), round(cy))
        pygame.draw.rect(surface, WHITE, highlight)

        surface.blit(question, question.get_rect(midbottom=(WINDOW_WIDTH // 2, WINDOW_HEIGHT - 220)))
        surface.blit(yes, yes.get_rect(midbottom=(400, WINDOW_HEIGHT - 80)))
        surface.blit(no, no.get_rect(midbottom=(1200, WINDOW_HEIGHT - 80)))