"""Retry policies wrapped around a whole reasoning run."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Tuple, Type, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
    wait_incrementing,
)

from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BackoffStrategy(str, Enum):
    EXPONENTIAL = "exponential"  # base * 2**(n-1)
    LINEAR = "linear"            # base * n
    CONSTANT = "constant"        # base


class RetryPolicy(ABC):
    @abstractmethod
    def call(self, fn: Callable[[], T]) -> T: ...


class NoRetry(RetryPolicy):
    def call(self, fn: Callable[[], T]) -> T:
        return fn()


class BackoffRetry(RetryPolicy):
    """Re-runs ``fn`` up to ``max_retries`` extra times; the last error is re-raised.

    Only exceptions listed in ``retry_on`` are retried.
    """

    def __init__(
        self,
        max_retries: int = 3,
        strategy: BackoffStrategy = BackoffStrategy.EXPONENTIAL,
        base_delay: float = 1.0,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.strategy = BackoffStrategy(strategy)
        self.base_delay = base_delay
        self.retry_on = retry_on
        self._sleep = sleep

    def call(self, fn: Callable[[], T]) -> T:
        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait(),
            retry=retry_if_exception_type(self.retry_on),
            before_sleep=self._log_retry,
            sleep=self._sleep,
        )
        return retrying(fn)

    def _wait(self):
        if self.strategy == BackoffStrategy.EXPONENTIAL:
            return wait_exponential(multiplier=self.base_delay, exp_base=2)
        if self.strategy == BackoffStrategy.LINEAR:
            return wait_incrementing(start=self.base_delay, increment=self.base_delay)
        return wait_fixed(self.base_delay)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "retrying_after_error",
            attempt=retry_state.attempt_number,
            max_retries=self.max_retries,
            delay=retry_state.next_action.sleep if retry_state.next_action else None,
            error=str(exc),
        )
