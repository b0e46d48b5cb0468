import threading

import pytest

from poolkit.threadpool import ThreadPool


class Recorder:
    def __init__(self, sink, lock, value):
        self.sink = sink
        self.lock = lock
        self.value = value

    def process(self):
        with self.lock:
            self.sink.append(self.value)


class Blocker:
    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    def process(self):
        self.started.set()
        self.release.wait(5)


@pytest.mark.parametrize("threads, requests", [(0, 10), (4, 0), (-1, 5), (2, -3)])
def test_invalid_arguments_raise(threads, requests):
    with pytest.raises(ValueError):
        ThreadPool(threads, requests)


def test_all_tasks_are_processed():
    sink, lock = [], threading.Lock()
    with ThreadPool(4, 100) as pool:
        results = [pool.append_task(Recorder(sink, lock, i)) for i in range(50)]
    assert all(results)
    assert sorted(sink) == list(range(50))


def test_single_worker_keeps_queue_order():
    sink, lock = [], threading.Lock()
    with ThreadPool(1, 100) as pool:
        for i in range(20):
            assert pool.append_task(Recorder(sink, lock, i))
    assert sink == list(range(20))


def test_close_drains_queued_tasks():
    sink, lock = [], threading.Lock()
    pool = ThreadPool(2, 1000)
    for i in range(200):
        pool.append_task(Recorder(sink, lock, i))
    pool.close()
    assert len(sink) == 200


def test_append_after_close_is_refused():
    sink, lock = [], threading.Lock()
    pool = ThreadPool(2, 10)
    pool.close()
    assert pool.append_task(Recorder(sink, lock, 1)) is False
    assert sink == []


def test_full_queue_is_refused():
    blocker = Blocker()
    pool = ThreadPool(1, 1)
    try:
        assert pool.append_task(blocker)
        assert blocker.started.wait(5)
        assert pool.append_task(None) is True
        assert pool.append_task(None) is False
    finally:
        blocker.release.set()
        pool.close()


def test_none_task_is_skipped():
    sink, lock = [], threading.Lock()
    with ThreadPool(2, 10) as pool:
        assert pool.append_task(None)
        assert pool.append_task(Recorder(sink, lock, "x"))
    assert sink == ["x"]


def test_creation_is_announced(capsys):
    with ThreadPool(3, 5):
        pass
    out = capsys.readouterr().out
    assert "create the 0th thread" in out
    assert out.count("thread\n") == 3


def test_close_twice_is_harmless():
    sink, lock = [], threading.Lock()
    pool = ThreadPool(2, 10)
    pool.append_task(Recorder(sink, lock, 7))
    pool.close()
    pool.close()
    assert sink == [7]