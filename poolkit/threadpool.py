"""A fixed-size pool of worker threads fed from a bounded task queue.

Tasks are objects with a ``process()`` method. Workers take tasks in the
order they were queued. Closing the pool lets the workers finish whatever
is still queued before they exit.
"""

from __future__ import annotations

import threading
from collections import deque


class ThreadPool:
    """Worker threads that run ``task.process()`` for every queued task."""

    def __init__(self, thread_number=8, max_requests=10000):
        if thread_number <= 0 or max_requests <= 0:
            raise ValueError("thread_number and max_requests must be positive")
        self.thread_number = thread_number
        self.max_requests = max_requests
        self._queue: deque = deque()
        self._cond = threading.Condition()
        self._stop = False
        self._threads: list[threading.Thread] = []
        for index in range(thread_number):
            print(f"create the {index}th thread")
            worker = threading.Thread(
                target=self._run, name=f"poolkit-worker-{index}", daemon=True
            )
            worker.start()
            self._threads.append(worker)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def append_task(self, task):
        """Queue a task; return False if the pool is closed or the queue is full."""
        with self._cond:
            if self._stop or len(self._queue) >= self.max_requests:
                return False
            self._queue.append(task)
            self._cond.notify()
        return True

    def _run(self):
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._queue or self._stop)
                if not self._queue:
                    return
                task = self._queue.popleft()
            if task is not None:
                task.process()

    def close(self):
        """Stop accepting tasks, let the workers drain the queue and join them."""
        with self._cond:
            self._stop = True
            self._cond.notify_all()
        current = threading.current_thread()
        for worker in self._threads:
            if worker is not current:
                worker.join()