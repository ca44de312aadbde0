"""A thread-safe queue that groups values per bin and hands them out in batches."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class _Cart(Generic[T]):
    lock: threading.Lock = field(default_factory=threading.Lock)
    basket: list = field(default_factory=list)


class CartQueue(Generic[T]):
    """Collects values in one cart per bin and queues each cart once it is full.

    Producers call insert from any thread; consumers call dequeue until it
    returns None, which happens once finish has been called and every queued
    cart has been taken.
    """

    def __init__(self, number_of_bins: int, cart_max_capacity: int, max_queued_carts: int) -> None:
        if cart_max_capacity < 1:
            raise ValueError("cart capacity must be at least 1")
        if max_queued_carts < 1:
            raise ValueError("at least one cart must fit into the queue")
        self.cart_max_capacity = cart_max_capacity
        self.max_queued_carts = max_queued_carts
        self.finishing = False
        self._carts: list[_Cart[T]] = [_Cart() for _ in range(number_of_bins)]
        self._filled: list[tuple[int, list[T]]] = []
        self._lock = threading.Lock()
        self._process_ready = threading.Condition(self._lock)
        self._queue_ready = threading.Condition(self._lock)

    def insert(self, bin_id: int, value: T) -> None:
        """Add a value to the cart of a bin, queueing the cart when it fills up."""
        if not 0 <= bin_id < len(self._carts):
            raise IndexError(f"bin_id {bin_id} has to be between 0 and {len(self._carts)}")
        cart = self._carts[bin_id]
        with cart.lock:
            cart.basket.append(value)
            if len(cart.basket) == self.cart_max_capacity:
                with self._lock:
                    while len(self._filled) >= self.max_queued_carts:
                        self._queue_ready.wait()
                    self._filled.append((bin_id, cart.basket))
                    cart.basket = []
                    self._process_ready.notify()

    def dequeue(self) -> tuple[int, list[T]] | None:
        """Take a full cart as (bin_id, values); None once finished and drained."""
        with self._lock:
            while not self._filled and not self.finishing:
                self._process_ready.wait()
            if not self._filled:
                return None
            cart = self._filled.pop()
            self._queue_ready.notify()
            return cart

    def finish(self) -> None:
        """Queue every partially filled cart and wake all waiting consumers."""
        for bin_id, cart in enumerate(self._carts):
            with cart.lock, self._lock:
                if cart.basket:
                    self._filled.append((bin_id, cart.basket))
                    cart.basket = []
                    self._process_ready.notify()
        with self._lock:
            self.finishing = True
            self._process_ready.notify_all()

    def __enter__(self) -> CartQueue[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.finishing:
            self.finish()