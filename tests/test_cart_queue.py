import threading

import pytest

from valik.cart_queue import CartQueue


def _drain(queue):
    carts = []
    while (cart := queue.dequeue()) is not None:
        carts.append(cart)
    return carts


def test_full_cart_is_queued():
    queue = CartQueue(3, 2, 10)
    queue.insert(1, "a")
    queue.insert(1, "b")
    assert queue.dequeue() == (1, ["a", "b"])


def test_finish_flushes_partial_carts():
    queue = CartQueue(3, 5, 10)
    queue.insert(0, "x")
    queue.insert(2, "y")
    queue.insert(2, "z")
    queue.finish()
    carts = _drain(queue)
    assert sorted(carts) == [(0, ["x"]), (2, ["y", "z"])]


def test_dequeue_after_finish_on_empty_queue_returns_none():
    queue = CartQueue(2, 3, 4)
    queue.finish()
    assert queue.dequeue() is None
    assert queue.finishing


def test_context_manager_finishes():
    with CartQueue(2, 4, 4) as queue:
        queue.insert(1, 7)
    assert queue.dequeue() == (1, [7])
    assert queue.dequeue() is None


def test_bin_out_of_range():
    queue = CartQueue(2, 2, 2)
    with pytest.raises(IndexError):
        queue.insert(2, "v")


def test_invalid_capacity():
    with pytest.raises(ValueError):
        CartQueue(2, 0, 2)


def test_producer_blocks_until_consumer_takes_cart():
    queue = CartQueue(1, 1, 1)
    queue.insert(0, "first")
    done = threading.Event()

    def produce():
        queue.insert(0, "second")
        done.set()

    producer = threading.Thread(target=produce)
    producer.start()
    assert not done.wait(0.2)
    first = queue.dequeue()
    producer.join(timeout=5)
    assert done.is_set()
    assert first == (0, ["first"])
    assert queue.dequeue() == (0, ["second"])


def test_concurrent_producers_and_consumer_lose_nothing():
    queue = CartQueue(4, 3, 2)
    received = []

    def consume():
        while (cart := queue.dequeue()) is not None:
            received.append(cart)

    consumer = threading.Thread(target=consume)
    consumer.start()
    producers = [
        threading.Thread(target=lambda b=b: [queue.insert(b, (b, i)) for i in range(20)])
        for b in range(4)
    ]
    for producer in producers:
        producer.start()
    for producer in producers:
        producer.join()
    queue.finish()
    consumer.join(timeout=5)

    values = sorted(value for _, cart in received for value in cart)
    assert values == sorted((b, i) for b in range(4) for i in range(20))
    assert all(bin_id == value[0] for bin_id, cart in received for value in cart)
    assert all(len(cart) <= 3 for _, cart in received)