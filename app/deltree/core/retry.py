"""Retry controller driving repeated deletion passes.

Each pass returns the failures it saw. A pass without failures ends the
operation; otherwise the failures are added to the history and, while
retries remain, the controller waits for the backoff delay before the
next pass. The wait is the only point where cancellation is observed.

Retry scheduling uses tenacity: a pass result that is non-empty is a
retryable outcome, the stop condition is the attempt budget and the
sleep function is an interruptible wait on a CancellationToken.
"""

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
    wait_none,
)
from tenacity.wait import wait_base

from deltree.models.config import DeletionConfig
from deltree.models.errors import CompositeDeletionError

logger = logging.getLogger(__name__)

PassFunction = Callable[[], list[OSError]]

# Longest single Event.wait; well below threading.TIMEOUT_MAX on every platform.
_MAX_WAIT_CHUNK = 3600.0


class Sleeper(Protocol):
    """Interruptible sleep primitive."""

    def sleep(self, seconds: float) -> bool:
        """Block for ``seconds``; return True if interrupted."""
        ...


class CancellationToken:
    """Cancellation signal honoured during the backoff wait.

    Waiting uses a monotonic clock. Observing the signal does not consume
    it: once cancelled, the token stays cancelled until reset().
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Signal cancellation, waking any thread blocked in sleep()."""
        self._event.set()

    def reset(self) -> None:
        """Clear a previous cancellation."""
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been signalled."""
        return self._event.is_set()

    def sleep(self, seconds: float) -> bool:
        """Wait up to ``seconds``, returning True if cancelled before or during the wait.

        Long waits are split into bounded chunks, so any delay (even an
        infinite one) is accepted without exceeding the platform timeout limit.
        """
        if seconds <= 0:
            return self._event.is_set()
        deadline = time.monotonic() + seconds
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return self._event.is_set()
            if self._event.wait(min(remaining, _MAX_WAIT_CHUNK)):
                return True


class _WaitInterrupted(Exception):
    """Raised from the tenacity sleep hook to abort the retry loop."""


class RetryController:
    """Runs passes until success, retry exhaustion or interruption.

    The controller keeps no state between calls and is safe to share.

    Attributes:
        _config: Retry budget and backoff settings.
    """

    def __init__(self, config: DeletionConfig) -> None:
        """Initialize the RetryController.

        Args:
            config: Deletion configuration supplying the retry settings.
        """
        self._config = config

    def run(self, path: Path, run_pass: PassFunction, sleeper: Sleeper | None = None) -> None:
        """Run ``run_pass`` repeatedly until it reports no failures.

        Args:
            path: Target of the operation, used in messages.
            run_pass: Callable performing one pass and returning its failures.
            sleeper: Interruptible sleep used between passes. A fresh
                CancellationToken is used when omitted.

        Raises:
            CompositeDeletionError: With every failure from every pass, when
                the retry budget is exhausted or the wait was interrupted.
        """
        sleeper = sleeper or CancellationToken()
        history: list[OSError] = []
        passes = 0

        def attempt() -> list[OSError]:
            nonlocal passes
            logger.debug("Deletion pass %d of %d for %s", passes + 1, self._config.max_attempts, path)
            errors = run_pass()
            passes += 1
            history.extend(errors)
            return errors

        def interruptible_sleep(seconds: float) -> None:
            if sleeper.sleep(seconds):
                raise _WaitInterrupted

        def log_retry(retry_state: RetryCallState) -> None:
            failures = retry_state.outcome.result() if retry_state.outcome else []
            next_sleep = retry_state.next_action.sleep if retry_state.next_action else 0.0
            logger.warning(
                "Deleting %s failed with %d error(s) (attempt %d/%d), retrying in %.3fs",
                path,
                len(failures),
                retry_state.attempt_number,
                self._config.max_attempts,
                next_sleep,
            )

        retrying = Retrying(
            stop=stop_after_attempt(self._config.max_attempts),
            wait=self._wait_strategy(),
            retry=retry_if_result(bool),
            sleep=interruptible_sleep,
            before_sleep=log_retry,
        )

        try:
            retrying(attempt)
        except RetryError:
            raise CompositeDeletionError(
                failure_message(path, self._config, passes - 1, interrupted=False), history
            ) from (history[0] if history else None)
        except _WaitInterrupted:
            raise CompositeDeletionError(
                failure_message(path, self._config, passes - 1, interrupted=True), history
            ) from (history[0] if history else None)

        logger.debug("Deleted %s after %d pass(es)", path, passes)

    def _wait_strategy(self) -> wait_base:
        config = self._config
        if config.wait_between_retries <= 0:
            return wait_none()
        if config.backoff_multiplier > 1.0:
            # tenacity counts attempts from 1: the first retry waits the base delay.
            return wait_exponential(
                multiplier=config.wait_between_retries,
                exp_base=config.backoff_multiplier,
            )
        return wait_fixed(config.wait_between_retries)


def failure_message(
    path: Path, config: DeletionConfig, retries_attempted: int, interrupted: bool
) -> str:
    """Build the self-contained message describing a failed operation.

    Args:
        path: Target of the operation.
        config: Configuration the operation ran with.
        retries_attempted: Zero-based index of the last pass that ran.
        interrupted: Whether the operation stopped because the wait was interrupted.

    Returns:
        Message stating the path, attempts, retry ceiling, waits and interruption.
    """
    attempts = retries_attempted + 1
    message = f"Unable to delete '{path}'. Tried {attempts} time{'s' if attempts > 1 else ''}"
    if config.max_retries > 0:
        message += f" (of a maximum of {config.max_attempts})"
        if config.wait_between_retries > 0:
            message += f" waiting {_format_seconds(config.wait_between_retries)}"
            # An interrupted operation was cut short during the wait after its last pass.
            last_wait = retries_attempted if interrupted else retries_attempted - 1
            if config.backoff_multiplier > 1.0 and last_wait > 0:
                message += f"-{_format_seconds(config.wait_for_retry(last_wait))}"
            message += " seconds between attempts"
    if interrupted:
        message += ". The delete operation was interrupted before it completed successfully"
    return message + "."


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"
