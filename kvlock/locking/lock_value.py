"""Lock value encoding: "<expires_at>__lock__<owner>_<ticks>". Shared wire format for every process on the store."""

import random
from dataclasses import dataclass
from typing import Optional

SEPARATOR = "__lock__"
TICKS_DIGITS = 4


def random_owner() -> str:
    """Owner used when the caller supplies none: a random positive 31-bit integer."""
    return str(random.randint(1, 2**31 - 1))


@dataclass(frozen=True)
class LockValue:
    """
    Payload stored at a lock key.
    expires_at is the logical (business) expiry in epoch seconds, independent of the store TTL.
    ticks is the sub-second part of the acquisition time; it tells apart rapid re-acquisitions by one owner.
    """

    expires_at: int
    owner: str
    ticks: str = "0000"

    @classmethod
    def build(cls, owner: str, ttl: int, now: float) -> "LockValue":
        seconds = int(now)
        # Truncate, never carry into the seconds; micro-rounding absorbs float noise (.1234 -> .12339997).
        ticks = min(round((now - seconds) * 10**6) // 10 ** (6 - TICKS_DIGITS), 10**TICKS_DIGITS - 1)
        return cls(expires_at=seconds + ttl, owner=str(owner), ticks=f"{ticks:0{TICKS_DIGITS}d}")

    @classmethod
    def parse(cls, raw: str) -> Optional["LockValue"]:
        """Parse a stored value. Returns None if the expiry prefix is missing or not an integer."""
        expires_part, sep, rest = raw.partition(SEPARATOR)
        if not sep:
            return None
        try:
            expires_at = int(expires_part)
        except ValueError:
            return None
        owner, _, ticks = rest.rpartition("_")
        if not owner:
            # No tick suffix; keep the whole remainder as the owner.
            return cls(expires_at=expires_at, owner=ticks, ticks="")
        return cls(expires_at=expires_at, owner=owner, ticks=ticks)

    def encode(self) -> str:
        return f"{self.expires_at}{SEPARATOR}{self.owner}_{self.ticks}"

    def is_expired(self, now: float) -> bool:
        """Stale once the current whole second is past the logical expiry."""
        return int(now) > self.expires_at
