import asyncio
import logging
from typing import Coroutine, Optional

logger = logging.getLogger(__name__)


def create_task(coro: Coroutine, *, name: Optional[str] = None,
                logger: logging.Logger = logger) -> asyncio.Task:
    """Start *coro* as a detached task and log its exception once finished.

    Nothing awaits the task; the callback makes sure a failure is never
    silently lost.
    """
    task = asyncio.create_task(coro, name=name)

    def _log_result(task: asyncio.Task) -> None:
        try:
            exc = task.exception()
        except asyncio.CancelledError:
            return
        if exc:
            logger.error("Unhandled task exception in %s", task.get_name(), exc_info=exc)

    task.add_done_callback(_log_result)
    return task
