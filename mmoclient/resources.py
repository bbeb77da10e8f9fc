"""Keyed registries of loaded textures and fonts."""

from __future__ import annotations

import functools
import json
from collections.abc import Callable
from typing import Any

import pygame


class ResourceError(RuntimeError):
    """Raised when a resource cannot be loaded or is not registered."""


class ResourceRegistry:
    """Resources loaded once and looked up by key.

    ``section`` names the list in a JSON manifest whose items carry a
    ``key`` and a ``path``.
    """

    def __init__(self, loader: Callable[[str], Any], section: str) -> None:
        self._loader = loader
        self._section = section
        singular = section[:-1] if section.endswith("s") else section
        self._kind = singular.lower()
        self._items: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def load(self, key: str, path: str) -> bool:
        """Load ``path`` under ``key``; False if the key is already taken."""
        if key in self._items:
            return False
        try:
            resource = self._loader(path)
        except Exception as exc:
            raise ResourceError(f"Failed to load {self._kind}: {path}") from exc
        self._items[key] = resource
        return True

    def load_all(self, json_path: str) -> None:
        """Load every entry listed in the manifest's section."""
        try:
            with open(json_path, encoding="utf-8") as file:
                root = json.load(file)
        except OSError as exc:
            raise ResourceError(f"Failed to open JSON file: {json_path}") from exc
        except json.JSONDecodeError as exc:
            raise ResourceError(f"Invalid JSON file: {json_path}") from exc
        for item in root.get(self._section) or []:
            self.load(str(item.get("key", "")), str(item.get("path", "")))

    def get(self, key: str) -> Any:
        """Return the resource registered under ``key``."""
        try:
            return self._items[key]
        except KeyError:
            raise ResourceError(f"{self._kind.capitalize()} not found: {key}") from None


class _FontFace:
    """A font file that yields pygame fonts at any character size."""

    def __init__(self, path: str) -> None:
        pygame.font.init()
        self.path = path
        self._sizes: dict[int, pygame.font.Font] = {}
        self.sized(30)

    def sized(self, size: int) -> pygame.font.Font:
        size = max(1, int(size))
        font = self._sizes.get(size)
        if font is None:
            font = pygame.font.Font(self.path, size)
            self._sizes[size] = font
        return font


def _load_texture(path: str) -> pygame.Surface:
    return pygame.image.load(path)


@functools.cache
def texture_registry() -> ResourceRegistry:
    """The shared texture registry."""
    return ResourceRegistry(_load_texture, "textures")


@functools.cache
def font_registry() -> ResourceRegistry:
    """The shared font registry; entries offer ``sized(n)``."""
    return ResourceRegistry(_FontFace, "fonts")