"""Deadline-driven polling used while waiting on ACM."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import ValidationTimeoutError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Clock:
    """Wall-clock access; tests substitute a fake that advances on sleep."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class Deadline:
    def __init__(self, clock: Clock, budget_seconds: float):
        self.clock = clock
        self.expires_at = clock.now() + budget_seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self.clock.now())

    def expired(self) -> bool:
        return self.clock.now() >= self.expires_at


def wait_for(
    probe: Callable[[], Optional[T]],
    *,
    clock: Clock,
    timeout: float,
    interval: float,
    stage: str,
    domain: Optional[str] = None,
    arn: Optional[str] = None,
) -> T:
    """
    Call `probe` until it returns something other than None.

    The deadline is checked on every iteration and a sleep never runs past it;
    running out of budget raises ValidationTimeoutError.
    """

    deadline = Deadline(clock, timeout)
    attempt = 0
    while True:
        attempt += 1
        result = probe()
        if result is not None:
            return result
        remaining = deadline.remaining()
        if remaining <= 0:
            raise ValidationTimeoutError(
                f"Gave up after {attempt} attempts in {timeout}s",
                stage=stage,
                domain=domain,
                arn=arn,
            )
        logger.info("%s not ready (attempt %d), retrying in %.1fs", stage, attempt, min(interval, remaining))
        clock.sleep(min(interval, remaining))
