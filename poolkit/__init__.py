"""Simulated memory pool, file-backed allocation leak tracker, worker thread pool and its benchmark."""

__version__ = "0.1.0"
__all__ = ["mempool", "leakcheck", "threadpool", "bench"]