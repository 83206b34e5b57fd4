# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass
class RateLimitWindow:
    count: int
    reset_at: float


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def retry_after(self, now: float) -> int:
        return max(int(self.reset_at - now + 0.999), 1)


class FixedWindowRateLimiter:
    """ 进程内固定窗口限流（按 key 计数），多实例部署需换成 Redis """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._windows: Dict[str, RateLimitWindow] = {}

    def now(self) -> float:
        return self._clock()

    def hit(self, key: str) -> RateLimitResult:
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now >= window.reset_at:
            if len(self._windows) > 10000:
                self._purge(now)
            window = RateLimitWindow(count=0, reset_at=now + self.window_seconds)
            self._windows[key] = window

        window.count += 1
        remaining = max(self.max_requests - window.count, 0)
        return RateLimitResult(
            allowed=window.count <= self.max_requests,
            limit=self.max_requests,
            remaining=remaining,
            reset_at=window.reset_at,
        )

    def reset(self, key: Optional[str] = None) -> None:
        if key is None:
            self._windows.clear()
        else:
            self._windows.pop(key, None)

    def _purge(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now >= w.reset_at]
        for k in expired:
            del self._windows[k]
