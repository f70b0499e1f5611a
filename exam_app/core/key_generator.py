"""Utility for generating short join keys that students type to open an exam."""

from __future__ import annotations

from collections.abc import Callable
import random
from threading import Lock

from exam_app.constants.exam_constants import EXAM_KEY_ALPHABET, EXAM_KEY_LENGTH

_MAX_ATTEMPTS = 1000


class KeyGenerator:
    """Produces random uppercase base-36 keys, skipping ones already taken."""

    def __init__(self, length: int = EXAM_KEY_LENGTH, seed: int | None = None):
        if length <= 0:
            raise ValueError("Key length must be positive.")
        self._length = length
        self._lock = Lock()
        self._rng = random.Random(seed)

    def next_key(self, is_taken: Callable[[str], bool] = lambda key: False) -> str:
        with self._lock:
            for _ in range(_MAX_ATTEMPTS):
                key = "".join(self._rng.choice(EXAM_KEY_ALPHABET) for _ in range(self._length))
                if not is_taken(key):
                    return key
        raise RuntimeError("Could not find an unused exam key.")
