"""Polling of Paperless consumption tasks until they settle."""

import asyncio
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    stop_never,
    wait_fixed,
)
from tenacity.stop import stop_base

from ..core.config import Settings, get_settings
from ..core.errors import PollTimeoutError
from ..core.logging import get_logger
from ..fetchers.paperless_client import PaperlessClient
from ..models.ingestion import IngestionTask

logger = get_logger(__name__)


def build_stop_condition(
    max_attempts: Optional[int],
    timeout: Optional[float],
) -> stop_base:
    """Combine the attempt cap and the deadline; neither set means poll forever."""
    stop: Optional[stop_base] = None
    if max_attempts:
        stop = stop_after_attempt(max_attempts)
    if timeout:
        deadline = stop_after_delay(timeout)
        stop = deadline if stop is None else stop | deadline
    return stop if stop is not None else stop_never


def _not_terminal(task: IngestionTask) -> bool:
    return not task.is_terminal


def _log_before_sleep(retry_state: RetryCallState) -> None:
    task = retry_state.outcome.result()
    if task.status:
        logger.info(
            "Task still pending",
            task_id=task.task_id,
            status=task.status,
            attempt=retry_state.attempt_number
        )
    else:
        logger.warning(
            "Task reported an empty status, polling again",
            task_id=task.task_id,
            attempt=retry_state.attempt_number
        )


class TaskPoller:
    """Re-queries a task at a fixed interval until its status is terminal.

    Transport and protocol errors from the client propagate immediately and
    are never retried. PENDING and empty statuses are re-polled after the
    interval; every other status is returned as terminal.
    """

    def __init__(
        self,
        client: PaperlessClient,
        interval: float = 5.0,
        max_attempts: Optional[int] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.interval = interval
        self.max_attempts = max_attempts
        self.timeout = timeout
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        client: PaperlessClient,
        settings: Optional[Settings] = None
    ) -> "TaskPoller":
        settings = settings or get_settings()
        return cls(
            client,
            interval=settings.poll_interval,
            max_attempts=settings.poll_max_attempts,
            timeout=settings.poll_timeout,
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=build_stop_condition(self.max_attempts, self.timeout),
            wait=wait_fixed(self.interval),
            retry=retry_if_result(_not_terminal),
            before_sleep=_log_before_sleep,
            sleep=self._sleep,
        )

    async def poll(self, task_id: str, token: str) -> IngestionTask:
        """Block until the task leaves PENDING and return its last snapshot."""
        logger.info("Polling task", task_id=task_id)

        try:
            task = await self._retrying()(self.client.get_task, task_id, token)
        except RetryError as e:
            last = e.last_attempt.result()
            logger.error(
                "Task did not finish in time",
                task_id=task_id,
                status=last.status,
                attempts=e.last_attempt.attempt_number
            )
            raise PollTimeoutError(
                f"Task {task_id} still {last.status or 'without status'} "
                f"after {e.last_attempt.attempt_number} polls"
            ) from e

        logger.info(
            "Task finished",
            task_id=task_id,
            status=task.status,
            result=task.result
        )
        return task
