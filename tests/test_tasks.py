import threading

from media_sorter.tasks import run_tasks


def test_collects_successes_in_input_order():
    results = run_tasks(range(20), lambda n: n * n, max_workers=4)

    assert results.succeeded == [n * n for n in range(20)]
    assert results.failed == []
    assert not results.cancelled


def test_one_failure_does_not_stop_the_rest():
    def work(n):
        if n == 3:
            raise OSError("disk on fire")
        return n

    results = run_tasks(range(6), work, max_workers=3)

    assert results.succeeded == [0, 1, 2, 4, 5]
    assert len(results.failed) == 1
    item, error = results.failed[0]
    assert item == 3
    assert isinstance(error, OSError)


def test_empty_input():
    results = run_tasks([], lambda n: n)
    assert results.succeeded == [] and results.failed == [] and results.skipped == []


def test_cancel_stops_unstarted_tasks():
    cancel = threading.Event()

    def work(n):
        cancel.set()
        return n

    # One worker: the first task runs, everything queued behind it is skipped
    results = run_tasks([1, 2, 3], work, max_workers=1, cancel_event=cancel)

    assert results.succeeded == [1]
    assert results.skipped == [2, 3]
    assert results.cancelled


def test_ctrl_c_while_waiting_cancels_queued_tasks(monkeypatch):
    import media_sorter.tasks as tasks_module
    started = threading.Event()
    cancel = threading.Event()

    def interrupted(futures):
        started.wait(5)
        raise KeyboardInterrupt

    def work(n):
        started.set()
        # Still running when Ctrl-C arrives; finishes once cancel is set
        cancel.wait(5)
        return n

    monkeypatch.setattr(tasks_module, "as_completed", interrupted)
    results = run_tasks([1, 2, 3], work, max_workers=1, cancel_event=cancel)

    assert cancel.is_set()
    assert results.succeeded == [1]
    assert results.skipped == [2, 3]


def test_progress_counter_is_thread_safe(progress):
    progress.start(500)
    run_tasks(range(500), lambda n: progress.increment(), max_workers=16)
    progress.stop()

    assert progress.completed == 500
