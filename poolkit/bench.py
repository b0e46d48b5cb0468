"""Throughput benchmark for :class:`poolkit.threadpool.ThreadPool`."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from dataclasses import dataclass, field

from poolkit.threadpool import ThreadPool

DEFAULT_WORK = 100000


class _Progress:
    """Counts queued and completed tasks and reports progress."""

    def __init__(self, stream):
        self.stream = stream
        self.task_count = 0
        self.completed = 0
        self._cond = threading.Condition()

    def add_task(self):
        with self._cond:
            self.task_count += 1

    def complete(self):
        with self._cond:
            self.completed += 1
            self.stream.write(f"\rCompleted: {self.completed}/{self.task_count}")
            self.stream.flush()
            self._cond.notify_all()

    def wait(self):
        with self._cond:
            self._cond.wait_for(lambda: self.completed >= self.task_count)


@dataclass
class CountingTask:
    """A task that does a fixed amount of busy work and reports completion."""

    progress: _Progress
    work: int = DEFAULT_WORK
    result: int = field(default=0, init=False)

    def process(self):
        """Do the work, then count this task as completed."""
        self.result = sum(range(self.work))
        self.progress.complete()


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of one benchmark run."""

    threads: int
    tasks: int
    elapsed_ms: float

    @property
    def throughput(self):
        """Tasks completed per second."""
        if self.elapsed_ms <= 0:
            return float("inf")
        return self.tasks * 1000.0 / self.elapsed_ms

    def report(self):
        return (
            "\n\nResults:"
            f"\nThreads: {self.threads}"
            f"\nTasks: {self.tasks}"
            f"\nTime: {int(self.elapsed_ms)}ms"
            f"\nThroughput: {self.throughput:g} tasks/sec\n"
        )


def run_benchmark(thread_num=16, max_tasks=10000):
    """Queue ``max_tasks`` tasks on ``thread_num`` workers and time them."""
    progress = _Progress(sys.stdout)
    with ThreadPool(thread_num, max_tasks) as pool:
        start = time.perf_counter()
        for index in range(max_tasks):
            if not pool.append_task(CountingTask(progress, DEFAULT_WORK)):
                print(f"Task queue full at {index} tasks", file=sys.stderr)
                break
            progress.add_task()
        progress.wait()
        elapsed_ms = (time.perf_counter() - start) * 1000.0
    return BenchmarkResult(thread_num, progress.task_count, elapsed_ms)


def main(argv=None):
    """Run the benchmark and print its results."""
    parser = argparse.ArgumentParser(
        prog="poolkit-bench", description="Measure thread pool throughput."
    )
    parser.add_argument("--threads", type=int, default=16)
    parser.add_argument("--tasks", type=int, default=10000)
    args = parser.parse_args(argv)
    if args.threads <= 0 or args.tasks <= 0:
        parser.error("--threads and --tasks must be positive")

    result = run_benchmark(args.threads, args.tasks)
    sys.stdout.write(result.report())
    sys.stdout.flush()
    return 0