import bisect
import logging
import math
from collections.abc import Iterable
from enum import Enum

import numpy as np

from asciishade.brightness import GlyphBrightnessCache
from asciishade.errors import EmptyCharsetError

logger = logging.getLogger(__name__)


class RoundingPolicy(Enum):
    """How a target brightness between two indexed values picks a neighbour."""

    ABS = "abs"  # nearer neighbour, ceiling on an exact tie
    UP = "up"  # ceiling
    DOWN = "down"  # floor

    @classmethod
    def parse(cls, value: "RoundingPolicy | str") -> "RoundingPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown rounding policy: {value!r}") from None


class CharacterMatcher:
    """Maps target brightness values in [0, 1] to characters of an active set.

    Raw brightness comes from a shared GlyphBrightnessCache. Characters are
    indexed by brightness normalized against the min/max of the active set:
    a sorted list of normalized keys, each owning a sorted bucket of the
    characters that share it.

    When an add or remove moves a bound, the index is only marked stale; the
    full renormalization happens on the next query. Adds and removes that
    leave the bounds alone update the index in place.
    """

    def __init__(
        self,
        chars: Iterable[str],
        cache: GlyphBrightnessCache,
        policy: RoundingPolicy | str = RoundingPolicy.ABS,
    ):
        self._cache = cache
        self._policy = RoundingPolicy.parse(policy)
        self._chars: set[str] = set()
        self._min_brightness = math.inf
        self._max_brightness = -math.inf
        self._keys: list[float] = []
        self._buckets: dict[float, list[str]] = {}
        self._stale = True
        for char in chars:
            self.add_char(char)

    @property
    def policy(self) -> RoundingPolicy:
        return self._policy

    @policy.setter
    def policy(self, value: RoundingPolicy | str) -> None:
        self._policy = RoundingPolicy.parse(value)

    def set_rounding_policy(self, policy: RoundingPolicy | str) -> None:
        self.policy = policy

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def bounds(self) -> tuple[float, float] | None:
        """(min, max) raw brightness of the active set, or None when it is empty."""
        if not self._chars:
            return None
        return self._min_brightness, self._max_brightness

    def add_char(self, char: str) -> None:
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        brightness = self._cache.ensure_brightness(char)
        self._chars.add(char)

        bound_moved = False
        if brightness > self._max_brightness:
            self._max_brightness = brightness
            bound_moved = True
        if brightness < self._min_brightness:
            self._min_brightness = brightness
            bound_moved = True

        if bound_moved:
            logger.debug(
                "Adding %r moved bounds to [%.4f, %.4f]", char, self._min_brightness, self._max_brightness
            )
            self._stale = True
        elif not self._stale:
            self._index_char(char)

    def remove_char(self, char: str) -> None:
        if char not in self._chars:
            return
        self._chars.remove(char)

        brightness = self._cache.raw_brightness(char)
        if brightness == self._min_brightness or brightness == self._max_brightness:
            self._recompute_bounds()
            self._stale = True
        elif not self._stale:
            self._unindex_char(char)

    def match(self, target: float) -> str:
        """Return the active character whose normalized brightness best fits target."""
        if not self._chars:
            raise EmptyCharsetError()
        if self._stale:
            self._rebuild_index()

        keys = self._keys
        if target >= keys[-1]:
            return self._buckets[keys[-1]][0]
        if target <= keys[0]:
            return self._buckets[keys[0]][0]

        i = bisect.bisect_left(keys, target)
        upper = keys[i]
        lower = upper if upper == target else keys[i - 1]

        if self._policy is RoundingPolicy.UP:
            key = upper
        elif self._policy is RoundingPolicy.DOWN:
            key = lower
        else:
            key = upper if upper - target <= target - lower else lower
        return self._buckets[key][0]

    def match_grid(self, grid) -> list[str]:
        """Match every cell of a 2D brightness array, one string per row."""
        grid = np.asarray(grid, dtype=np.float64)
        if grid.ndim != 2:
            raise ValueError(f"Expected a 2D brightness grid, got shape {grid.shape}")
        return ["".join(self.match(float(v)) for v in row) for row in grid]

    def normalized_brightness(self, char: str) -> float:
        if char not in self._chars:
            raise KeyError(char)
        if self._stale:
            self._rebuild_index()
        return self._normalize(self._cache.raw_brightness(char))

    def chars(self) -> list[str]:
        """Active characters in sorted order."""
        return sorted(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def __contains__(self, char: str) -> bool:
        return char in self._chars

    def __str__(self) -> str:
        return " ".join(self.chars())

    def _normalize(self, brightness: float) -> float:
        span = self._max_brightness - self._min_brightness
        if span == 0:
            return 0.0
        return (brightness - self._min_brightness) / span

    def _recompute_bounds(self) -> None:
        values = [self._cache.raw_brightness(c) for c in self._chars]
        self._min_brightness = min(values, default=math.inf)
        self._max_brightness = max(values, default=-math.inf)
        logger.debug("Recomputed bounds over %d chars: %s", len(values), self.bounds)

    def _rebuild_index(self) -> None:
        self._keys = []
        self._buckets = {}
        for char in self._chars:
            self._index_char(char)
        self._stale = False
        logger.debug("Rebuilt brightness index: %d chars in %d buckets", len(self._chars), len(self._keys))

    def _index_char(self, char: str) -> None:
        key = self._normalize(self._cache.raw_brightness(char))
        bucket = self._buckets.get(key)
        if bucket is None:
            bisect.insort(self._keys, key)
            self._buckets[key] = [char]
        elif char not in bucket:
            bisect.insort(bucket, char)

    def _unindex_char(self, char: str) -> None:
        key = self._normalize(self._cache.raw_brightness(char))
        bucket = self._buckets.get(key)
        if bucket is None or char not in bucket:
            return
        bucket.remove(char)
        if not bucket:
            del self._buckets[key]
            self._keys.pop(bisect.bisect_left(self._keys, key))
