"""
Per-IP submission cooldown.

Keeps the time of each client's last accepted post in memory. Nothing is
persisted; the map starts empty whenever the process starts.
"""

import math
import time
from typing import Dict, Optional

PRUNE_EVERY = 256


def now_ms() -> int:
    """Get current time in milliseconds since epoch.

    Returns:
        Current timestamp in milliseconds.
    """
    return int(time.time() * 1000)


class CooldownLimiter:
    """Allow one submission per IP per cooldown window.

    Attributes:
        cooldown_ms: Minimum gap between two accepted posts from one IP.
    """

    def __init__(self, cooldown_ms: int):
        self.cooldown_ms = cooldown_ms
        self._last_post: Dict[str, int] = {}
        self._calls = 0

    def __len__(self) -> int:
        return len(self._last_post)

    def __contains__(self, ip: str) -> bool:
        return ip in self._last_post

    def hit(self, ip: str, now: Optional[int] = None) -> bool:
        """Check the cooldown for ip and record the post if it is allowed.

        Args:
            ip: Client address.
            now: Current epoch ms, defaults to the wall clock.

        Returns:
            True if the post is allowed (and now recorded), False otherwise.
        """
        now = now_ms() if now is None else now

        self._calls += 1
        if self._calls >= PRUNE_EVERY:
            self._calls = 0
            self.prune(now)

        last = self._last_post.get(ip)
        if last is not None and now - last < self.cooldown_ms:
            return False

        self._last_post[ip] = now
        return True

    def retry_after(self, ip: str, now: Optional[int] = None) -> int:
        """Seconds until ip may post again, rounded up. 0 if it may post now."""
        now = now_ms() if now is None else now
        last = self._last_post.get(ip)
        if last is None:
            return 0
        remaining = self.cooldown_ms - (now - last)
        if remaining <= 0:
            return 0
        return math.ceil(remaining / 1000)

    def prune(self, now: Optional[int] = None) -> int:
        """Remove all entries whose cooldown has elapsed.

        Returns:
            Number of entries removed.
        """
        now = now_ms() if now is None else now
        expired = [
            ip for ip, last in self._last_post.items()
            if now - last >= self.cooldown_ms
        ]
        for ip in expired:
            del self._last_post[ip]
        return len(expired)
