"""Fixed-size pool of worker threads returning futures."""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable


class ThreadPool:
    """Runs submitted callables on a fixed set of threads."""

    def __init__(self, threads: int) -> None:
        self._tasks: deque[Callable[[], None]] = deque()
        self._condition = threading.Condition()
        self._stop = False
        self._workers = [
            threading.Thread(target=self._run, daemon=True) for _ in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue a call and return a future for its result."""
        future: Future = Future()

        def task() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

        with self._condition:
            if self._stop:
                raise RuntimeError("enqueue on stopped ThreadPool")
            self._tasks.append(task)
            self._condition.notify()
        return future

    def shutdown(self) -> None:
        """Stop accepting work, finish queued tasks and join the workers."""
        with self._condition:
            self._stop = True
            self._condition.notify_all()
        for worker in self._workers:
            if worker is not threading.current_thread():
                worker.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def _run(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stop or self._tasks)
                if self._stop and not self._tasks:
                    return
                task = self._tasks.popleft()
            task()