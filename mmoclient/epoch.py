"""Epoch-based reclamation pool and per-thread identifiers."""

from __future__ import annotations

import os
import threading
from collections import deque
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .defines import UINT64_MAX

T = TypeVar("T")

_local = threading.local()


def set_thread_id(thread_id: int) -> None:
    """Assign the calling thread its slot index."""
    _local.thread_id = thread_id


def get_thread_id() -> int:
    """Return the calling thread's slot index, or -1 when unassigned."""
    return getattr(_local, "thread_id", -1)


class EpochBasedReclamation(Generic[T]):
    """Pool that recycles objects only once no thread can still see them.

    Objects handed back through :meth:`reuse` are stamped with the current
    epoch and recycled by :meth:`get` only when every thread's slot has moved
    past that epoch.  Recycled objects are re-initialised with ``reset``.
    """

    MAX_ULLONG = UINT64_MAX

    def __init__(self, factory: Callable[..., T], thread_num: int | None = None):
        if thread_num is None:
            thread_num = os.cpu_count() or 1
        if thread_num <= 0:
            raise ValueError("thread_num must be positive")
        self._factory = factory
        self._thread_num = thread_num
        self._lock = threading.Lock()
        self._epoch_counter = 0
        self._epochs = [0] * thread_num
        self._free_lists: list[deque[tuple[int, T]]] = [deque() for _ in range(thread_num)]

    def _slot(self) -> int:
        thread_id = get_thread_id()
        if not 0 <= thread_id < self._thread_num:
            raise RuntimeError(
                f"thread id {thread_id} is not a slot of this pool (0..{self._thread_num - 1})"
            )
        return thread_id

    def clear(self) -> None:
        """Drop every pooled object and restart the epoch counter."""
        for free_list in self._free_lists:
            free_list.clear()
        with self._lock:
            self._epoch_counter = 0

    def reuse(self, obj: T) -> None:
        """Hand an object back to the calling thread's free list."""
        self._free_lists[self._slot()].append((self._epoch_counter, obj))

    def get(self, *args: Any, **kwargs: Any) -> T:
        """Return a recycled object if safe, otherwise a freshly made one."""
        free_list = self._free_lists[self._slot()]
        if not free_list:
            return self._factory(*args, **kwargs)
        retired_at, obj = free_list[0]
        if any(epoch < retired_at for epoch in self._epochs):
            return self._factory(*args, **kwargs)
        free_list.popleft()
        obj.reset(*args, **kwargs)
        return obj

    def start_epoch(self) -> None:
        """Enter a new epoch on the calling thread."""
        slot = self._slot()
        with self._lock:
            self._epoch_counter += 1
            epoch = self._epoch_counter
        self._epochs[slot] = epoch

    def end_epoch(self) -> None:
        """Leave the current epoch on the calling thread."""
        self._epochs[self._slot()] = self.MAX_ULLONG