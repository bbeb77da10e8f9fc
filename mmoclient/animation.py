"""Sprite-sheet animation descriptions, grouped per object."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Animation:
    """Where an animation's frames sit in a texture and how fast they flip."""

    offset_x: int = 0
    offset_y: int = 0
    frame_width: int = 0
    frame_height: int = 0
    number_of_frames: int = 0
    frame_flip_time: float = 0.0


_EMPTY_ANIMATION = Animation()


class AnimationSet:
    """Named animations belonging to one kind of object."""

    def __init__(self) -> None:
        self._animations: dict[str, Animation] = {}

    def get_animation(self, name: str) -> Animation:
        """Return the named animation, or an empty one when unknown."""
        return self._animations.get(name, _EMPTY_ANIMATION)

    def add_animation(
        self,
        name: str,
        start_x: int,
        start_y: int,
        frame_width: int,
        frame_height: int,
        frame_number: int,
        frame_duration: float,
    ) -> None:
        """Register an animation; an existing one of that name is kept."""
        self._animations.setdefault(
            name,
            Animation(start_x, start_y, frame_width, frame_height, frame_number, frame_duration),
        )


class AnimationManager:
    """Animation sets keyed by object name."""

    def __init__(self) -> None:
        self._sets: dict[str, AnimationSet] = {}

    def get_animation_set(self, object_name: str) -> AnimationSet:
        """Return the object's set, or an empty unregistered set when unknown."""
        found = self._sets.get(object_name)
        return found if found is not None else AnimationSet()

    def add_animation_object(self, object_name: str) -> None:
        """Register an empty set for the object unless it already has one."""
        self._sets.setdefault(object_name, AnimationSet())


@dataclass
class PresentAnimation:
    """Playback state of the animation an object is currently showing."""

    animation_name: str = ""
    current_frame: int = 0
    elapsed_time: int = field(default=0)