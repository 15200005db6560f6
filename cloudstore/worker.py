"""Background worker that hands queued log buffers to a callback."""

from __future__ import annotations

import sys
import threading
from collections import deque
from enum import Enum
from typing import Callable

from .buffer import Buffer
from .logconf import LogConfig, get_config


class AsyncType(Enum):
    """Whether buffers may grow without bound."""

    ASYNC_SAFE = "safe"
    ASYNC_UNSAFE = "unsafe"


class AsyncWorker:
    """Queues pushed data and writes it out on background threads."""

    def __init__(
        self,
        callback: Callable[[Buffer], None],
        async_type: AsyncType = AsyncType.ASYNC_SAFE,
        config: LogConfig | None = None,
    ) -> None:
        self._config = config if config is not None else get_config()
        self.async_type = async_type
        self._callback = callback
        self._queue: deque[Buffer] = deque()
        self._condition = threading.Condition()
        self._stopped = False
        count = max(1, int(self._config.write_thread_count))
        self._threads = [
            threading.Thread(target=self._run, name=f"log-writer-{i}", daemon=True)
            for i in range(count)
        ]
        for thread in self._threads:
            thread.start()

    def push(self, data: bytes) -> None:
        """Queue a chunk of data for the callback."""
        buffer = Buffer(self._config)
        buffer.push(data)
        with self._condition:
            if self._stopped:
                raise RuntimeError("push on stopped AsyncWorker")
            self._queue.append(buffer)
            self._condition.notify()

    def stop(self) -> None:
        """Drain the queue and join the worker threads."""
        with self._condition:
            self._stopped = True
            self._condition.notify_all()
        for thread in self._threads:
            if thread is not threading.current_thread():
                thread.join()

    def _run(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stopped or self._queue)
                if not self._queue:
                    return
                buffer = self._queue.popleft()
            try:
                self._callback(buffer)
            except Exception as exc:  # keep the writer alive
                print(f"log writer callback failed: {exc}", file=sys.stderr)