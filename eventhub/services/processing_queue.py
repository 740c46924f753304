# Processing queue - FIFO admission of media jobs with a bounded number running at once

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, Deque, Set, Tuple

from eventhub.core.exceptions import JobFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingJob:
    """
    One unit of externally executed work (transcode, resize).

    Attributes:
        id: Identifies the job among the jobs currently in the same queue
            (usually the id of the media the job belongs to)
        run: Zero-argument coroutine function doing the actual work; raises on failure
    """

    id: str
    run: Callable[[], Awaitable[None]]


class ProcessingQueue:
    """
    An asynchronous queue for media processing jobs.

    Jobs start in submission order and at most ``concurrency`` of them run at
    the same time. Every submission gets its own future which settles with
    that job's outcome only; a failing job never stops the queue.
    """

    def __init__(self, concurrency: int = 1, name: str = "processing"):
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.name = name
        self.concurrency = concurrency
        self._pending: Deque[Tuple[ProcessingJob, asyncio.Future]] = deque()
        self._running = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of jobs waiting to be started"""
        return len(self._pending)

    @property
    def running(self) -> int:
        """Number of jobs currently executing"""
        return self._running

    def submit(self, job: ProcessingJob) -> "asyncio.Future[None]":
        """
        Add a job to the tail of the queue.

        Must be called from a running event loop. Returns immediately.

        Args:
            job: The job to execute

        Returns:
            Future that resolves when the job finished successfully, or fails
            with JobFailure (underlying error chained as __cause__)
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending.append((job, future))
        logger.debug(f"[{self.name}] queued job {job.id} ({len(self._pending)} pending)")
        self._start_pending()
        return future

    def stats(self) -> dict:
        return {
            "name": self.name,
            "concurrency": self.concurrency,
            "running": self._running,
            "pending": len(self._pending),
        }

    def _start_pending(self):
        while self._pending and self._running < self.concurrency:
            job, future = self._pending.popleft()
            self._running += 1
            task = asyncio.ensure_future(self._execute(job, future))
            # Keep a strong reference until the task is done
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _execute(self, job: ProcessingJob, future: asyncio.Future):
        logger.debug(f"[{self.name}] starting job {job.id}")
        try:
            await job.run()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            logger.warning(f"[{self.name}] job {job.id} failed: {e}")
            if not future.done():
                failure = JobFailure(job.id, f"Job {job.id} failed: {e}")
                failure.__cause__ = e
                future.set_exception(failure)
        except BaseException as e:
            logger.error(f"[{self.name}] job {job.id} aborted: {e!r}")
            if not future.done():
                failure = JobFailure(job.id, f"Job {job.id} aborted: {e!r}")
                failure.__cause__ = e
                future.set_exception(failure)
            raise
        else:
            if not future.done():
                future.set_result(None)
        finally:
            self._running -= 1
            self._start_pending()
