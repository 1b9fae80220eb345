"""Queueing network built by chaining packet streams through queue stages."""

from __future__ import annotations

import argparse
import itertools
import math
import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class QueuePacket:
    """A packet number and time stamp; a negative number ends a stream."""

    num: int
    time: float

    def is_end(self) -> bool:
        return self.num < 0


END = QueuePacket(-1, 0.0)


def _drain(stream: Iterable[object]) -> None:
    deque(stream, maxlen=0)


def generate(
    mean_interval: float, count: int, rng: random.Random | None = None
) -> Iterator[QueuePacket]:
    """Yield packets 1 .. count-1 with exponential gaps, then END."""
    rng = rng if rng is not None else random.Random()
    clock = 0.0
    for num in range(1, count):
        clock += mean_interval * rng.expovariate(1.0)
        yield QueuePacket(num, clock)
    print("[END] generate")
    yield END


class QueueStage:
    """A single FIFO server with exponential service; forwards END and stops."""

    def __init__(self, mean_service: float, rng: random.Random | None = None) -> None:
        self.mean_service = mean_service
        self.rng = rng if rng is not None else random.Random()
        self.busy_until = 0.0
        self.total_delay = 0.0
        self.last_num = 0
        self.processed = 0

    def __call__(self, packets: Iterable[QueuePacket]) -> Iterator[QueuePacket]:
        for packet in packets:
            if packet.is_end():
                print(f"[QUEUE STAT] {self.mean_service:f} [AVERAGE] {self.average():f}")
                yield packet
                return
            if packet.time > self.busy_until:
                self.busy_until = packet.time
            self.busy_until += self.mean_service * self.rng.expovariate(1.0)
            self.total_delay += self.busy_until - packet.time
            self.last_num = packet.num
            self.processed += 1
            yield QueuePacket(packet.num, self.busy_until)

    def average(self) -> float:
        """Total delay divided by the number of the last packet served; nan if none."""
        if self.last_num == 0:
            return math.nan
        return self.total_delay / self.last_num


def random_filter(
    packets: Iterable[QueuePacket], probability: float = 0.5, rng: random.Random | None = None
) -> Iterator[QueuePacket]:
    """Keep each packet with the given probability; END always passes."""
    rng = rng if rng is not None else random.Random()
    for packet in packets:
        if packet.is_end() or probability >= rng.random():
            yield packet


def combine(first: Iterable[QueuePacket], second: Iterable[QueuePacket]) -> Iterator[QueuePacket]:
    """Merge two streams by time, renumbering packets from 0, ending with END.

    A time is held back and swapped with any later one read, switching to the
    other stream each time; once one stream ends the other passes straight on.
    """
    current, other = iter(first), iter(second)
    held = 0.0
    one_closed = False
    index = 0
    while True:
        packet = next(current, END)
        if packet.is_end():
            if one_closed:
                yield packet
                return
            one_closed = True
            current, other = other, current
            continue
        stamp = packet.time
        if not one_closed and stamp > held:
            stamp, held = held, stamp
            current, other = other, current
        yield QueuePacket(index, stamp)
        index += 1


def split(packets: Iterable[QueuePacket]) -> tuple[Iterator[QueuePacket], Iterator[QueuePacket]]:
    """Return two independent copies of a stream."""
    first, second = itertools.tee(packets, 2)
    return first, second


def simulate(seed: int | None = None) -> dict[str, float]:
    """Run two sources through queues, merge, split and serve each branch.

    Returns the average reported by every queue stage.
    """
    rng = random.Random(seed)
    stages = {
        "queue1": QueueStage(0.5, rng),
        "queue2": QueueStage(0.9, rng),
        "queue3": QueueStage(0.7, rng),
        "merged": QueueStage(0.01, rng),
        "branch_a": QueueStage(0.3, rng),
        "branch_b": QueueStage(0.5, rng),
    }
    first = stages["queue2"](stages["queue1"](generate(3.0, 1000, rng)))
    second = stages["queue3"](generate(4.0, 1000, rng))
    merged = stages["merged"](combine(first, second))
    branch_a, branch_b = split(merged)
    _drain(stages["branch_a"](branch_a))
    _drain(stages["branch_b"](branch_b))
    return {name: stage.average() for name, stage in stages.items()}


def run_linear_chain(count: int = 1000, seed: int | None = None) -> int:
    """Pass a generated stream through two queues; return how many packets arrived."""
    rng = random.Random(seed)
    stream = QueueStage(0.7, rng)(QueueStage(0.5, rng)(generate(3.0, count, rng)))
    received = 0
    for packet in stream:
        if packet.is_end():
            break
        received += 1
    print(f"[OLD SINK] Total received: {received} packets")
    return received


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate a chained queueing network.")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "--linear", type=int, default=None, metavar="COUNT",
        help="run a simple linear chain with COUNT packets instead",
    )
    args = parser.parse_args(argv)
    if args.linear is not None:
        started = time.perf_counter()
        received = run_linear_chain(args.linear, args.seed)
        elapsed = time.perf_counter() - started
        print(f"Received {received} packets in {elapsed:.3f}s")
        return 0
    for name, average in simulate(args.seed).items():
        print(f"{name}: {average:f}")
    return 0