import pytest

from nachos.scheduler import Scheduler
from nachos.synch import Condition, Lock, Semaphore
from nachos.thread import Thread, ThreadStatus


class Deadlock(Exception):
    pass


class _Kernel:
    def __init__(self):
        self.scheduler = Scheduler(self)
        self.current_thread = Thread("main", self)
        self.current_thread.status = ThreadStatus.RUNNING

    def idle(self):
        raise Deadlock("no thread is ready to run")


@pytest.fixture
def kernel():
    return _Kernel()


def test_negative_initial_value_rejected(kernel):
    with pytest.raises(ValueError):
        Semaphore("bad", -1, kernel)


def test_p_on_positive_semaphore_does_not_block(kernel):
    sem = Semaphore("s", 2, kernel)
    sem.p()
    sem.p()
    assert kernel.current_thread.status is ThreadStatus.RUNNING
    with pytest.raises(Deadlock):
        sem.p()


def test_v_then_p_does_not_block(kernel):
    sem = Semaphore("s", 0, kernel)
    sem.v()
    sem.p()
    assert kernel.current_thread.status is ThreadStatus.RUNNING
    assert len(kernel.scheduler) == 0


def test_semaphore_ping_pong(kernel):
    main = kernel.current_thread
    pong = Semaphore("test", 0, kernel)
    ping = Semaphore("ping", 0, kernel)
    log = []

    def helper(sem):
        for i in range(10):
            ping.p()
            log.append(("helper", i))
            sem.v()

    Thread("ping", kernel).fork(helper, pong)
    for i in range(10):
        ping.v()
        pong.p()
        log.append(("main", i))

    assert kernel.current_thread is main
    expected = []
    for i in range(10):
        expected += [("helper", i), ("main", i)]
    assert log == expected


def test_v_wakes_waiting_thread(kernel):
    main = kernel.current_thread
    sem = Semaphore("s", 0, kernel)
    log = []

    def waiter(_):
        sem.p()
        log.append("woken")

    worker = Thread("waiter", kernel)
    worker.fork(waiter, None)
    main.yield_cpu()
    assert log == []
    assert worker.status is ThreadStatus.BLOCKED

    sem.v()
    assert worker.status is ThreadStatus.READY
    main.yield_cpu()
    assert log == ["woken"]


def test_lock_held_by_acquirer(kernel):
    lock = Lock("l", kernel)
    assert not lock.is_held_by_current_thread()
    lock.acquire()
    assert lock.is_held_by_current_thread()
    lock.release()
    assert not lock.is_held_by_current_thread()


def test_release_without_holding_raises(kernel):
    lock = Lock("l", kernel)
    with pytest.raises(RuntimeError):
        lock.release()


def test_lock_context_manager(kernel):
    lock = Lock("l", kernel)
    with lock as held:
        assert held is lock
        assert lock.is_held_by_current_thread()
    assert not lock.is_held_by_current_thread()


def test_lock_blocks_other_thread_until_released(kernel):
    main = kernel.current_thread
    lock = Lock("l", kernel)
    log = []

    def contender(_):
        with lock:
            log.append("got it")

    lock.acquire()
    Thread("contender", kernel).fork(contender, None)
    main.yield_cpu()
    assert log == []

    lock.release()
    main.yield_cpu()
    assert log == ["got it"]
    lock.acquire()
    assert lock.is_held_by_current_thread()


def test_condition_requires_lock(kernel):
    lock = Lock("l", kernel)
    cond = Condition("c", kernel)
    with pytest.raises(RuntimeError):
        cond.signal(lock)
    with pytest.raises(RuntimeError):
        cond.wait(lock)


def test_condition_signal_wakes_waiter(kernel):
    main = kernel.current_thread
    lock = Lock("l", kernel)
    cond = Condition("c", kernel)
    items = []
    taken = []

    def consumer(_):
        with lock:
            while not items:
                cond.wait(lock)
            taken.append(items.pop())

    Thread("consumer", kernel).fork(consumer, None)
    main.yield_cpu()
    assert len(cond) == 1
    assert taken == []

    with lock:
        items.append("item")
        cond.signal(lock)
    assert len(cond) == 0
    main.yield_cpu()
    assert taken == ["item"]
    assert items == []


def test_signal_with_no_waiters_is_lost(kernel):
    lock = Lock("l", kernel)
    cond = Condition("c", kernel)
    with lock:
        cond.signal(lock)
    assert len(cond) == 0
    assert len(kernel.scheduler) == 0


def test_broadcast_wakes_all_waiters(kernel):
    main = kernel.current_thread
    lock = Lock("l", kernel)
    cond = Condition("c", kernel)
    woken = []

    def waiter(name):
        with lock:
            cond.wait(lock)
            woken.append(name)

    for name in ("w1", "w2"):
        Thread(name, kernel).fork(waiter, name)
    main.yield_cpu()
    assert len(cond) == 2

    with lock:
        cond.broadcast(lock)
    assert len(cond) == 0
    main.yield_cpu()
    assert woken == ["w1", "w2"]
    assert kernel.current_thread is main