"""Deferred follow-up delivery, cancellable per chat session"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Set

from mindmate.observability import metrics

logger = logging.getLogger(__name__)

FollowUpAction = Callable[[], Awaitable[None]]


class FollowUpScheduler:
    """
    Runs follow-up actions after a fixed pause, one task per pending action.

    Tasks are grouped by session id so that tearing a session down cancels
    everything still waiting for it. A cancelled action never starts; an
    action that already started is allowed to finish, and cancel() waits for
    it instead of counting it as cancelled.
    """

    def __init__(self):
        self._tasks: Dict[str, Set[asyncio.Task]] = {}
        # Scheduled task -> task running its action, once the delay has elapsed
        self._running: Dict[asyncio.Task, asyncio.Task] = {}

    def schedule(self, session_id: str, action: FollowUpAction, delay: float) -> asyncio.Task:
        """
        Schedule an action for a session

        Args:
            session_id: Chat session the action belongs to
            action: Zero-argument coroutine function to run after the delay
            delay: Seconds to wait before running the action
        """
        task = asyncio.create_task(self._run(session_id, action, delay))
        self._tasks.setdefault(session_id, set()).add(task)
        task.add_done_callback(lambda t: self._forget(session_id, t))
        logger.debug(f"Scheduled follow-up for session {session_id} in {delay:.2f}s")
        return task

    async def _run(self, session_id: str, action: FollowUpAction, delay: float) -> None:
        await asyncio.sleep(delay)

        scheduled = asyncio.current_task()
        running = asyncio.create_task(self._invoke(session_id, action))
        self._running[scheduled] = running
        running.add_done_callback(lambda _: self._running.pop(scheduled, None))

        # Once started, an action runs to completion even if the session ends
        await asyncio.shield(running)

    async def _invoke(self, session_id: str, action: FollowUpAction) -> None:
        try:
            await action()
        except Exception as e:
            logger.error(f"Follow-up for session {session_id} failed: {e}", exc_info=True)

    def _forget(self, session_id: str, task: asyncio.Task) -> None:
        tasks = self._tasks.get(session_id)
        if tasks is None:
            return
        tasks.discard(task)
        if not tasks:
            del self._tasks[session_id]

    def pending(self, session_id: str) -> int:
        """Number of follow-ups for a session that have not finished yet"""
        return len(self._tasks.get(session_id, ()))

    async def cancel(self, session_id: str) -> int:
        """
        Cancel every follow-up for a session that is still waiting

        Follow-ups whose action already started are not cancelled; this
        waits for them to finish.

        Returns:
            Number of follow-ups that were dropped unsent
        """
        tasks = list(self._tasks.get(session_id, ()))
        started = [t for t in tasks if t in self._running]
        waiting = [t for t in tasks if t not in self._running]

        for task in waiting:
            task.cancel()

        for task in waiting:
            try:
                await task
            except asyncio.CancelledError:
                pass  # Expected when we cancel the task

        if started:
            await asyncio.gather(*started, return_exceptions=True)

        cancelled = sum(1 for task in waiting if task.cancelled())
        if cancelled:
            metrics.follow_ups_cancelled_total.inc(cancelled)
            logger.info(f"Cancelled {cancelled} pending follow-up(s) for session {session_id}")
        return cancelled

    async def aclose(self) -> None:
        """Cancel everything still waiting and let started actions finish"""
        for session_id in list(self._tasks):
            await self.cancel(session_id)
