"""Process-lifetime cache of spectral quantities indexed by number of points."""

import logging
import threading

import numpy as np

logger = logging.getLogger(__name__)


def _freeze(value):
    """Mark arrays (also inside tuples) read-only so cached data can be shared."""
    if isinstance(value, np.ndarray):
        value.flags.writeable = False
    elif isinstance(value, tuple):
        for item in value:
            _freeze(item)
    return value


class StaticCache:
    """Cache of `generator(num_points)` for every `num_points` in [min_points, max_points].

    The whole range is computed on the first lookup and kept until `clear()`.
    The first lookup is guarded by a lock, so concurrent first access computes
    each value exactly once. Later lookups do not take the lock.

    Parameters
    ----------
    generator : callable
        Maps a number of points to the cached quantity.
    min_points, max_points : int
        Inclusive range of valid keys.
    name : str, optional
        Label used in log and error messages.
    """

    def __init__(self, generator, min_points, max_points, name=None):
        if min_points > max_points:
            raise ValueError(f"Empty cache range [{min_points}, {max_points}]")
        self.generator = generator
        self.min_points = min_points
        self.max_points = max_points
        self.name = name or getattr(generator, "__name__", "quantity")
        self.generation_count = 0
        self._data = None
        self._lock = threading.Lock()

    def __call__(self, num_points):
        if num_points < self.min_points:
            raise ValueError(
                f"Tried to work with less than the minimum number of collocation points "
                f"for this quadrature: {num_points} < {self.min_points} ({self.name})"
            )
        if num_points > self.max_points:
            raise ValueError(
                f"Exceeded maximum number of collocation points: "
                f"{num_points} > {self.max_points} ({self.name})"
            )
        data = self._data
        if data is None:
            data = self._populate()
        return data[num_points - self.min_points]

    @property
    def is_populated(self):
        return self._data is not None

    def _populate(self):
        with self._lock:
            if self._data is None:
                logger.debug(
                    "Computing %s for %d..%d points", self.name, self.min_points, self.max_points
                )
                data = tuple(
                    _freeze(self.generator(n)) for n in range(self.min_points, self.max_points + 1)
                )
                self.generation_count += 1
                self._data = data
            return self._data

    def clear(self):
        """Forget the computed values; the next lookup recomputes the range."""
        with self._lock:
            self._data = None

    def __repr__(self):
        state = "populated" if self.is_populated else "empty"
        return f"StaticCache({self.name}, [{self.min_points}, {self.max_points}], {state})"
