"""
Scroll Timer
============

Single-shot countdown for the sequence's trip across the screen.

The timer is driven from outside: either a frame loop calls tick(dt), or the
host's own scroll animation calls fire(generation) when it finishes. Each arm()
bumps the generation, so an expiry that belongs to an earlier round is
recognised and dropped.
"""

from __future__ import annotations

from typing import Callable, Optional

ExpiryCallback = Callable[[int], None]


class ScrollTimer:
    """
    Cancelable countdown handle with a monotonically increasing generation.
    """

    def __init__(self):
        self._generation: int = 0
        self._duration: float = 0.0
        self._remaining: float = 0.0
        self._active: bool = False
        self._callback: Optional[ExpiryCallback] = None

    @property
    def generation(self) -> int:
        """Generation of the most recent arm()."""
        return self._generation

    @property
    def active(self) -> bool:
        """True while a countdown is running."""
        return self._active

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def remaining(self) -> float:
        """Seconds left, 0 when idle."""
        return self._remaining if self._active else 0.0

    @property
    def progress(self) -> float:
        """Fraction of the scroll completed, in [0, 1]."""
        if self._duration <= 0:
            return 0.0
        return min(1.0, max(0.0, 1.0 - self._remaining / self._duration))

    def arm(self, duration: float, callback: ExpiryCallback) -> int:
        """
        Start a new countdown, replacing any running one.

        Args:
            duration: Seconds until expiry.
            callback: Called with the generation on natural expiry.

        Returns:
            The new generation.
        """
        self._generation += 1
        self._duration = float(duration)
        self._remaining = float(duration)
        self._callback = callback
        self._active = True
        return self._generation

    def cancel(self) -> None:
        """Stop the countdown without firing. Safe to call when idle."""
        self._active = False
        self._callback = None

    def tick(self, dt: float) -> bool:
        """
        Advance the countdown.

        Args:
            dt: Seconds elapsed since the last tick.

        Returns:
            True if the timer expired during this tick.
        """
        if not self._active or dt <= 0:
            return False
        self._remaining -= dt
        if self._remaining > 0:
            return False
        self._remaining = 0.0
        self._expire()
        return True

    def fire(self, generation: Optional[int] = None) -> bool:
        """
        Expire now, on behalf of an external scroll animation.

        Args:
            generation: Generation the animation was started with. A stale
                generation is ignored. None means the current one.

        Returns:
            True if the callback ran.
        """
        if not self._active:
            return False
        if generation is not None and generation != self._generation:
            return False
        self._remaining = 0.0
        self._expire()
        return True

    def _expire(self) -> None:
        callback = self._callback
        generation = self._generation
        self._active = False
        self._callback = None
        if callback is not None:
            callback(generation)
