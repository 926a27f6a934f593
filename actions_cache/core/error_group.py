import asyncio
from collections.abc import Coroutine
from typing import Any


class ErrorGroup:
    """
    Run coroutines as sibling tasks, based on Go's errgroup.Group.

    The first task to fail cancels every other task; ``wait`` re-raises that
    first error unchanged once all tasks have finished.

    Example:
        ```python
        group = ErrorGroup()
        for _ in range(4):
            group.go(worker())

        await group.wait()  # raises the first worker error, if any
        ```
    """

    def __init__(self) -> None:
        self._tasks: list[asyncio.Task[Any]] = []
        self._error: BaseException | None = None

    @property
    def failed(self) -> bool:
        """True once any task has raised."""
        return self._error is not None

    def go(self, coro: Coroutine[Any, Any, Any]) -> None:
        """
        Start a coroutine in the group.

        Raises:
            RuntimeError: If called outside a running event loop.
        """
        task = asyncio.create_task(coro)
        task.add_done_callback(self._on_done)
        self._tasks.append(task)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled() or self._error is not None:
            return
        if (error := task.exception()) is None:
            return
        self._error = error
        for other in self._tasks:
            if not other.done():
                other.cancel()

    async def wait(self) -> None:
        """
        Wait for every task, then raise the first error.

        Cancelling the waiter cancels every task in the group.
        """
        try:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        except asyncio.CancelledError:
            for task in self._tasks:
                task.cancel()
            raise
        if self._error is not None:
            raise self._error

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tasks={len(self._tasks)}, failed={self.failed})"
