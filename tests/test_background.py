import threading

import pytest

from anvilkv.background import BackgroundExecutor

TIMEOUT = 5.0


def test_compactor_tasks_run_in_submission_order():
    seen = []
    done = threading.Event()
    with BackgroundExecutor() as executor:
        for i in range(10):
            executor.spawn_compactor_bg(lambda i=i: seen.append(i))
        executor.spawn_compactor_bg(done.set)
        assert done.wait(TIMEOUT)
    assert seen == list(range(10))


def test_wal_tasks_run_in_submission_order():
    seen = []
    done = threading.Event()
    with BackgroundExecutor() as executor:
        for i in range(10):
            executor.spawn_wal_bg(lambda i=i: seen.append(i))
        executor.spawn_wal_bg(done.set)
        assert done.wait(TIMEOUT)
    assert seen == list(range(10))


def test_lanes_are_independent():
    gate = threading.Event()
    wal_done = threading.Event()
    executor = BackgroundExecutor()
    try:
        executor.spawn_compactor_bg(lambda: gate.wait(TIMEOUT))
        executor.spawn_wal_bg(wal_done.set)
        assert wal_done.wait(TIMEOUT)
        assert not gate.is_set()
    finally:
        gate.set()
        executor.close()


def test_tasks_run_on_threads_other_than_caller():
    names = []
    done = threading.Event()
    with BackgroundExecutor() as executor:
        executor.spawn_compactor_bg(lambda: names.append(threading.current_thread()))
        executor.spawn_compactor_bg(done.set)
        assert done.wait(TIMEOUT)
    assert names[0] is not threading.current_thread()


def test_failing_task_does_not_stop_lane():
    done = threading.Event()

    def boom():
        raise RuntimeError("expected failure")

    with BackgroundExecutor() as executor:
        executor.spawn_compactor_bg(boom)
        executor.spawn_compactor_bg(done.set)
        assert done.wait(TIMEOUT)


def test_queued_tasks_finish_after_close():
    done = threading.Event()
    executor = BackgroundExecutor()
    executor.spawn_wal_bg(done.set)
    executor.close()
    assert done.wait(TIMEOUT)


def test_spawn_after_close_raises():
    executor = BackgroundExecutor()
    executor.close()
    with pytest.raises(RuntimeError):
        executor.spawn_compactor_bg(lambda: None)
    with pytest.raises(RuntimeError):
        executor.spawn_wal_bg(lambda: None)


def test_close_is_idempotent_and_context_manager_closes():
    with BackgroundExecutor() as executor:
        pass
    executor.close()
    with pytest.raises(RuntimeError):
        executor.spawn_wal_bg(lambda: None)


def test_non_callable_task_rejected():
    with BackgroundExecutor() as executor:
        with pytest.raises(TypeError):
            executor.spawn_compactor_bg(42)