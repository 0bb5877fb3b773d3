import logging
import time
from typing import Any, Callable, Optional, TypeVar

import httpx

logger = logging.getLogger("petstore.polling")

T = TypeVar("T")


class AwaitTimeoutError(AssertionError):
    """
    Raised when a polled condition is still unsatisfied once the deadline passes.

    Carries the last observation so a failing test can tell "the service
    answered something else" apart from "the service never converged".
    """

    def __init__(self, description: str, timeout: float, interval: float, attempts: int, last_observation: Any):
        self.description = description
        self.timeout = timeout
        self.interval = interval
        self.attempts = attempts
        self.last_observation = last_observation
        super().__init__(
            f"Condition '{description}' was not met within {timeout}s "
            f"(poll interval {interval}s, {attempts} attempts). "
            f"Last observation: {describe_observation(last_observation)}"
        )


def describe_observation(observation: Any) -> str:
    if isinstance(observation, httpx.Response):
        request = observation.request
        return f"{request.method} {request.url} -> {observation.status_code} {observation.text[:500]}"
    return repr(observation)


def await_until(
    action: Callable[[], T],
    predicate: Callable[[T], bool],
    *,
    timeout: float,
    interval: float,
    description: Optional[str] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Purpose:  Repeats `action` until `predicate(observation)` holds or `timeout`
              seconds have elapsed, and returns the satisfying observation.

    How it works:
    - The deadline is fixed once, before the first attempt.
    - Each round calls the action once and evaluates the predicate.
    - A satisfied predicate returns at once, with no extra sleep.
    - An unsatisfied predicate past the deadline raises AwaitTimeoutError.
    - Otherwise the caller blocks for `interval` seconds and tries again.

    Anything the action raises (httpx.TransportError and friends) propagates
    on the spot; a failed exchange is never counted as "not yet".

    `clock` and `sleep` exist so tests can drive time by hand.
    """
    if timeout < 0:
        raise ValueError(f"timeout must be >= 0, got {timeout}")
    if interval <= 0:
        raise ValueError(f"interval must be > 0, got {interval}")

    description = description or getattr(action, "__name__", "condition")
    deadline = clock() + timeout
    attempts = 0

    while True:
        observation = action()
        attempts += 1

        if predicate(observation):
            if attempts > 1:
                logger.info(f"'{description}' satisfied after {attempts} attempts")
            return observation

        if clock() >= deadline:
            logger.error(f"'{description}' timed out after {attempts} attempts")
            raise AwaitTimeoutError(description, timeout, interval, attempts, observation)

        logger.debug(f"'{description}' not satisfied (attempt {attempts}): {describe_observation(observation)}")
        sleep(interval)
