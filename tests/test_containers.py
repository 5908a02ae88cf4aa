import threading

import pytest

from servercore.containers import EventLockQueue, LockStack


def test_queue_is_fifo():
    queue = EventLockQueue()
    assert queue.empty() is True
    for item in ["a", "b", "c"]:
        queue.push(item)
    assert queue.empty() is False
    assert [queue.pop() for _ in range(3)] == ["a", "b", "c"]
    assert queue.empty() is True


def test_queue_pop_waits_for_push():
    queue = EventLockQueue()
    results = []
    worker = threading.Thread(target=lambda: results.append(queue.pop()))
    worker.start()
    worker.join(0.1)
    assert worker.is_alive() is True
    queue.push(("system", "wake"))
    worker.join(2)
    assert results == [("system", "wake")]


def test_queue_concurrent_producers():
    queue = EventLockQueue()

    def produce(base):
        for n in range(100):
            queue.push(base + n)

    workers = [threading.Thread(target=produce, args=(k * 1000,)) for k in range(4)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    items = [queue.pop() for _ in range(400)]
    assert sorted(items) == sorted(k * 1000 + n for k in range(4) for n in range(100))
    assert queue.empty() is True


def test_stack_is_lifo():
    stack = LockStack()
    for item in [1, 2, 3]:
        stack.push(item)
    assert stack.top() == 3
    assert stack.top() == 3
    assert [stack.pop() for _ in range(3)] == [3, 2, 1]
    assert stack.empty() is True


def test_stack_empty_errors():
    stack = LockStack()
    with pytest.raises(IndexError):
        stack.pop()
    with pytest.raises(IndexError):
        stack.top()


def test_stack_concurrent_pushes():
    stack = LockStack()

    def produce():
        for n in range(200):
            stack.push(n)

    workers = [threading.Thread(target=produce) for _ in range(4)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()
    popped = []
    while not stack.empty():
        popped.append(stack.pop())
    assert len(popped) == 800