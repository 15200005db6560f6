import threading

import pytest

from cloudstore.threadpool import ThreadPool


def test_submit_returns_result():
    with ThreadPool(2) as pool:
        future = pool.submit(lambda a, b: a + b, 2, 3)
        assert future.result(timeout=5) == 5


def test_kwargs_are_passed():
    with ThreadPool(1) as pool:
        future = pool.submit(lambda text, sep: sep.join(text), "abc", sep="-")
        assert future.result(timeout=5) == "a-b-c"


def test_exception_propagates():
    def boom():
        raise KeyError("missing")

    with ThreadPool(1) as pool:
        future = pool.submit(boom)
        with pytest.raises(KeyError):
            future.result(timeout=5)


def test_submit_after_shutdown_raises():
    pool = ThreadPool(1)
    pool.shutdown()
    with pytest.raises(RuntimeError, match="stopped ThreadPool"):
        pool.submit(print)


def test_shutdown_drains_queue():
    results = []
    lock = threading.Lock()

    def record(value):
        with lock:
            results.append(value)

    pool = ThreadPool(3)
    futures = [pool.submit(record, n) for n in range(50)]
    pool.shutdown()
    assert all(f.done() for f in futures)
    assert sorted(results) == list(range(50))


def test_tasks_run_on_worker_threads():
    main = threading.get_ident()
    with ThreadPool(2) as pool:
        ident = pool.submit(threading.get_ident).result(timeout=5)
    assert ident != main
    assert isinstance(ident, int)