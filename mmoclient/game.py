"""The game client: owns the connection and the current scene and runs the main loop."""

from __future__ import annotations

import argparse
import logging
import re
import sys
import time
from collections.abc import Sequence

import pygame

from .defines import PORT_NUM, WINDOW_HEIGHT, WINDOW_WIDTH, ClassType
from .framing import Connection
from .game_scene import GameScene
from .mapfile import WorldMap
from .protocol import (
    AttackRequest,
    ChatRequest,
    InteractionRequest,
    LoginRequest,
    MoveRequest,
    RegisterRequest,
    RespawnRequest,
    SetBasePosRequest,
    TeleportRequest,
)
from .resources import ResourceError, font_registry, texture_registry
from .scenes import CreateScene, LoginScene, Scene, SceneType, TitleScene

_log = logging.getLogger(__name__)

WINDOW_TITLE = "MMORPG GAME"
LOOPBACK_ADDRESS = "127.0.0.1"
DEFAULT_MAP_PATH = "../Resource/map.bin"
DEFAULT_FONT_PATH = "Resource/Font/neodgm.ttf"
DEFAULT_TEXTURE_MANIFEST = "Resource/Texture/TextureSet.json"
FONT_KEY = "neodot"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _parse_int(text: str) -> int:
    """Read a leading decimal integer the way a lenient C parser would."""
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"{value} is out of range")
    return value


def _to_int16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


class Game:
    """Holds the session state shared by all scenes and sends requests to the server."""

    def __init__(
        self,
        connection: Connection | None = None,
        developer: bool = False,
        map_path: str | None = DEFAULT_MAP_PATH,
    ) -> None:
        self.connection = connection if connection is not None else Connection()
        self.developer = bool(developer)
        self.map_path = map_path
        self.my_id = 0
        self.class_type = int(ClassType.NONE)
        self.name = ""
        self.running = True
        self.scene: Scene = TitleScene(self)

    # ------------------------------------------------------------- main loop

    def run(self, address: str = LOOPBACK_ADDRESS) -> None:
        """Connect to ``address`` and run frames until the game is closed."""
        pygame.init()
        try:
            surface = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
            pygame.display.set_caption(WINDOW_TITLE)
            pygame.key.start_text_input()
            self.connect(address)
            last = time.monotonic_ns()
            while self.running:
                now = time.monotonic_ns()
                delta_time = (now - last) // 1000
                last = now

                for event in pygame.event.get():
                    self.handle_input(event)
                if not self.running:
                    break

                surface.fill((0, 0, 0))
                self.process_packets(self.connection.recv())
                self.update(delta_time)
                self.draw(surface)
                pygame.display.flip()
        finally:
            self.connection.close()
            pygame.quit()

    def update(self, delta_time: int) -> None:
        """Advance the scene by ``delta_time`` microseconds."""
        self.scene.update(delta_time)

    def draw(self, surface: pygame.Surface) -> None:
        """Draw the scene, then its screen-fixed overlay."""
        self.scene.draw(surface)
        self.scene.hud(surface)

    def handle_input(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.exit()
        self.scene.handle_input(event)

    def exit(self) -> None:
        """Stop the main loop after the current frame."""
        self.running = False

    # --------------------------------------------------------------- sending

    def _send(self, packet) -> None:
        self.connection.send(packet.encode())

    def send_login(self, name: str) -> None:
        self._send(LoginRequest(name))

    def send_register(self, class_type: int) -> None:
        """Ask to create a character of ``class_type`` under the current name."""
        self._send(RegisterRequest(self.name, int(class_type)))

    def send_attack(self, atk_key: int, atk_dir: int) -> None:
        self._send(AttackRequest(int(atk_key), int(atk_dir)))

    def send_move(self, direction: int) -> None:
        self._send(MoveRequest(int(direction), 0))

    def send_chat(self, text: str) -> None:
        self._send(ChatRequest(text))

    def send_respawn(self) -> None:
        self._send(RespawnRequest())

    def send_teleport(self, x: int, y: int) -> None:
        """Ask to be placed at (x, y); coordinates wrap to 16 bits as on the wire."""
        self._send(TeleportRequest(_to_int16(x), _to_int16(y)))

    def send_interaction(self) -> None:
        self._send(InteractionRequest())

    def send_set_base_pos(self) -> None:
        self._send(SetBasePosRequest())

    # ------------------------------------------------------------- receiving

    def process_packets(self, data: bytes) -> None:
        """Hand a buffer of whole packets to the current scene."""
        if not data:
            return
        self.scene.process_packets(data)

    def handle_chat_command(self, command: str) -> bool:
        """Run a chat line as a command; False if it is not one or is malformed."""
        tokens = command.split()
        if not tokens:
            return False
        if tokens[0] == "/tp":
            if len(tokens) != 3:
                _log.warning("invalid command; teleport is: /tp x y")
                return False
            try:
                x = _parse_int(tokens[1])
                y = _parse_int(tokens[2])
            except ValueError:
                _log.warning("invalid value in x, y")
                return False
            self.send_teleport(x, y)
            return True
        return False

    def connect(self, address: str) -> None:
        """Connect to the game server at ``address``."""
        self.connection.connect(address, PORT_NUM)

    # ---------------------------------------------------------------- scenes

    def _load_world(self) -> WorldMap:
        if self.map_path is None:
            return WorldMap(0, 0)
        return WorldMap.load(self.map_path)

    def load_scene(self, scene_type: SceneType) -> None:
        """Replace the current scene with a fresh one of ``scene_type``."""
        scene_type = SceneType(scene_type)
        if scene_type == SceneType.TITLE:
            self.scene = TitleScene(self)
        elif scene_type == SceneType.LOGIN:
            self.scene = LoginScene(self)
        elif scene_type == SceneType.CREATE:
            self.scene = CreateScene(self)
        elif scene_type == SceneType.GAME:
            self.scene = GameScene(self, self._load_world())


def main(argv: Sequence[str] | None = None) -> int:
    """Load resources, connect and play; returns the process exit status."""
    parser = argparse.ArgumentParser(description="Play the MMORPG client.")
    parser.add_argument("--address", help="server address (asked for when missing)")
    parser.add_argument("--developer", action="store_true", help="ignore action cooldowns")
    parser.add_argument("--map", default=DEFAULT_MAP_PATH, help="binary map file")
    parser.add_argument("--font", default=DEFAULT_FONT_PATH, help="font file")
    parser.add_argument("--textures", default=DEFAULT_TEXTURE_MANIFEST, help="texture manifest")
    args = parser.parse_args(argv)

    try:
        font_registry().load(FONT_KEY, args.font)
        texture_registry().load_all(args.textures)
    except ResourceError as exc:
        print(f"cannot load resources: {exc}", file=sys.stderr)
        return 1

    address = args.address
    if address is None:
        try:
            address = input("Server address: ").strip()
        except EOFError:
            address = ""
        if not address:
            address = LOOPBACK_ADDRESS

    game = Game(developer=args.developer, map_path=args.map)
    try:
        game.run(address)
    except ConnectionError as exc:
        print(f"cannot talk to the server: {exc}", file=sys.stderr)
        return 1
    return 0