"""
Access Token Rotation.

Time-sliced, stateless selection among several credentials so that polling
load is spread evenly across the upstream rate-limit reset cycle.
"""

from collections.abc import Iterable
from typing import Tuple


class NoAccessTokensError(ValueError):
    """Raised when token rotation is configured with zero credentials."""


class AccessTokenRotation:
    """
    Immutable ordered set of access tokens.

    The token for a given instant is a pure function of wall-clock time, the
    rate-limit cycle and the poll interval; no cursor is stored.

    Example:
        rotation = AccessTokenRotation(["a", "b"], cycle_seconds=3600, interval_seconds=1)
        rotation.pick(now_ms=1000)  # "b"
    """

    __slots__ = ("_tokens", "cycle_seconds", "interval_seconds")

    def __init__(
        self,
        tokens: Iterable[str],
        cycle_seconds: float = 3600,
        interval_seconds: float = 1,
    ):
        tokens = tuple(tokens)
        if not tokens:
            raise NoAccessTokensError("at least one access token is required")
        if interval_seconds <= 0 or cycle_seconds < interval_seconds:
            raise ValueError(
                f"cycle ({cycle_seconds}s) must be >= interval ({interval_seconds}s) > 0"
            )
        self._tokens = tokens
        self.cycle_seconds = cycle_seconds
        self.interval_seconds = interval_seconds

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def slots_per_cycle(self) -> int:
        """Number of polls per rate-limit cycle."""
        return int(self.cycle_seconds // self.interval_seconds)

    def index_at(self, now_ms: float) -> int:
        """Index of the token whose turn it is at ``now_ms`` (epoch milliseconds)."""
        now_seconds = int(now_ms // 1000)
        cycle_slot = now_seconds % self.slots_per_cycle
        return cycle_slot % len(self._tokens)

    def pick(self, now_ms: float) -> str:
        return self._tokens[self.index_at(now_ms)]
