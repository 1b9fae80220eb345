"""Stages of a prime sieve that pass numbers through queues."""

from __future__ import annotations

import queue
from dataclasses import dataclass, replace
from typing import Any, Callable


@dataclass(frozen=True)
class PrimeTuple:
    """A candidate number; a negative number ends the stream."""

    num: int
    prime: bool = False

    def is_end(self) -> bool:
        return self.num < 0


END = PrimeTuple(-1, False)


def prime_generator(start: int, end: int) -> Callable[[Any, "queue.Queue[PrimeTuple]"], bool]:
    """Make a stage that emits the numbers from ``start`` to ``end``, then END."""
    current = start

    def step(_inbox: Any, outbox: "queue.Queue[PrimeTuple]") -> bool:
        nonlocal current
        if current > end:
            outbox.put(END)
            print("[END] Number generation complete")
            return True
        outbox.put(PrimeTuple(current, False))
        current += 1
        return False

    return step


def prime_filter(
    prime: int,
) -> Callable[["queue.Queue[PrimeTuple]", "queue.Queue[PrimeTuple]"], bool]:
    """Make a stage that drops multiples of ``prime``."""

    def step(inbox: "queue.Queue[PrimeTuple]", outbox: "queue.Queue[PrimeTuple]") -> bool:
        item = inbox.get()
        if item.is_end():
            print(f"[FILTER] Prime {prime} filter complete")
            outbox.put(item)
            return True
        if item.num % prime != 0:
            outbox.put(item)
        return False

    return step


def prime_detector() -> Callable[["queue.Queue[PrimeTuple]", "queue.Queue[PrimeTuple]"], bool]:
    """Make a stage that marks every number reaching it as prime."""

    def step(inbox: "queue.Queue[PrimeTuple]", outbox: "queue.Queue[PrimeTuple]") -> bool:
        item = inbox.get()
        if item.is_end():
            print("[DETECTOR] Prime detection complete")
            outbox.put(item)
            return True
        print(f"Prime found: {item.num}")
        outbox.put(replace(item, prime=True))
        return False

    return step


class PrimeCollector:
    """Final stage that gathers the numbers marked as prime."""

    def __init__(self) -> None:
        self.primes: list[int] = []

    def __call__(self, inbox: "queue.Queue[PrimeTuple]") -> bool:
        item = inbox.get()
        if item.is_end():
            listing = " ".join(str(p) for p in self.primes)
            print(f"[COLLECTOR] Found {len(self.primes)} primes: [{listing}]")
            return True
        if item.prime:
            self.primes.append(item.num)
        return False


def int_param(params: dict[str, Any], name: str) -> int:
    """Read an integer parameter given as an int or a float."""
    value = params.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Invalid type for {name} parameter: {type(value).__name__}")
    return int(value)


def prime_node_factories() -> dict[str, Callable[[dict[str, Any]], Callable[..., bool]]]:
    """Map sieve node type names to factories that build stages from parameters."""
    return {
        "prime_generator": lambda params: prime_generator(
            int_param(params, "start"), int_param(params, "end")
        ),
        "prime_filter": lambda params: prime_filter(int_param(params, "prime")),
        "prime_detector": lambda params: prime_detector(),
        "prime_collector": lambda params: PrimeCollector(),
    }