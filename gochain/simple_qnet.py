"""Queueing network stages that exchange packets through queues."""

from __future__ import annotations

import queue
import random
from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Packet:
    """A packet with an identifier and a time stamp; a negative id ends a stream."""

    id: int
    time: float

    def is_end(self) -> bool:
        return self.id < 0


END = Packet(-1, 0.0)

Channel = "queue.Queue[Packet]"


def generator(
    rate: float, count: int, rng: random.Random | None = None
) -> Callable[[Any, "queue.Queue[Packet]"], bool]:
    """Make a stage that emits ``count`` packets with exponential gaps, then END."""
    rng = rng if rng is not None else random.Random()
    current = 0
    time = 0.0

    def step(_inbox: Any, outbox: "queue.Queue[Packet]") -> bool:
        nonlocal current, time
        if current >= count:
            outbox.put(END)
            return True
        current += 1
        time += rate * rng.expovariate(1.0)
        outbox.put(Packet(current, time))
        return False

    return step


def queue_stage(
    service_time: float, rng: random.Random | None = None
) -> Callable[["queue.Queue[Packet]", "queue.Queue[Packet]"], bool]:
    """Make a single-server FIFO stage with exponential service times."""
    rng = rng if rng is not None else random.Random()
    busy_until = 0.0
    processed = 0
    total_delay = 0.0

    def step(inbox: "queue.Queue[Packet]", outbox: "queue.Queue[Packet]") -> bool:
        nonlocal busy_until, processed, total_delay
        packet = inbox.get()
        if packet.is_end():
            if processed > 0:
                print(
                    f"[QUEUE] Service: {service_time:.2f}, "
                    f"Average Delay: {total_delay / processed:.2f}"
                )
            outbox.put(packet)
            return True
        if packet.time > busy_until:
            busy_until = packet.time
        busy_until += service_time * rng.expovariate(1.0)
        total_delay += busy_until - packet.time
        processed += 1
        outbox.put(Packet(packet.id, busy_until))
        return False

    return step


def combiner() -> Callable[
    ["queue.Queue[Packet]", "queue.Queue[Packet]", "queue.Queue[Packet]"], bool
]:
    """Make a stage that merges two streams in time order."""
    held: list[Packet | None] = [None, None]
    done = [False, False]

    def step(
        first: "queue.Queue[Packet]",
        second: "queue.Queue[Packet]",
        outbox: "queue.Queue[Packet]",
    ) -> bool:
        for index, inbox in enumerate((first, second)):
            if held[index] is None and not done[index]:
                packet = inbox.get()
                if packet.is_end():
                    done[index] = True
                else:
                    held[index] = packet

        if all(done):
            outbox.put(END)
            return True

        one, two = held
        if one is not None and two is not None:
            index = 0 if one.time <= two.time else 1
        elif one is not None:
            index = 0
        elif two is not None:
            index = 1
        else:
            return False

        selected = held[index]
        held[index] = None
        outbox.put(selected)
        return False

    return step


def sink() -> Callable[["queue.Queue[Packet]"], bool]:
    """Make a stage that consumes packets until END arrives."""

    def step(inbox: "queue.Queue[Packet]") -> bool:
        return inbox.get().is_end()

    return step


def run_until_done(step: Callable[..., bool], *args: Any) -> None:
    """Call ``step(*args)`` until it reports completion."""
    while not step(*args):
        pass


def _number(params: dict[str, Any], name: str) -> float:
    value = params[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Invalid type for {name} parameter: {type(value).__name__}")
    return float(value)


def _count(params: dict[str, Any]) -> int:
    value = params.get("count")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def simple_node_factories(
    rng: random.Random | None = None,
) -> dict[str, Callable[[dict[str, Any]], Callable[..., bool]]]:
    """Map node type names to factories that build stages from parameters."""
    rng = rng if rng is not None else random.Random()
    return {
        "sequence": lambda params: generator(_number(params, "rate"), _count(params), rng),
        "queue": lambda params: queue_stage(_number(params, "service_time"), rng),
        "combiner": lambda params: combiner(),
        "sink": lambda params: sink(),
    }