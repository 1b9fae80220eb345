"""Open queueing network simulation built from merged arrival streams."""

from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from typing import Iterable, Iterator


def _take(stream: Iterator[float]) -> float:
    try:
        return next(stream)
    except StopIteration:
        raise ValueError("stream ended before the requested count") from None


def junction(first: Iterable[float], second: Iterable[float], count: int) -> Iterator[float]:
    """Merge two time-ordered streams, yielding ``count`` values in order.

    One value of ``second`` is held back first; each value read is compared
    with the held one, the smaller is emitted and reading continues from the
    stream it came from.
    """
    current, waiting = iter(first), iter(second)
    buffered = _take(waiting)
    for _ in range(count):
        value = _take(current)
        if value > buffered:
            value, buffered = buffered, value
            current, waiting = waiting, current
        yield value


def combine(streams: Iterable[Iterable[float]], count: int) -> Iterator[float]:
    """Merge several time-ordered streams of ``count`` values each.

    Every stream must carry one extra trailing value that is later than all
    real ones; it is never emitted.
    """
    sources = [iter(stream) for stream in streams]
    total = len(sources)
    if total < 2:
        raise ValueError("at least two streams are needed")
    if count < 0:
        raise ValueError("count must not be negative")
    merged = junction(sources[-2], sources[-1], 2 * count)
    for index in range(total - 3, -1, -1):
        merged = junction(merged, sources[index], count * (total - index))
    return merged


def generate(
    count: int, mean_interval: float = 2.0, rng: random.Random | None = None
) -> Iterator[float]:
    """Yield ``count`` arrival times from 0 with exponential gaps, then a closing time."""
    rng = rng if rng is not None else random.Random()
    time = 0.0
    for _ in range(count):
        yield time
        time += mean_interval * rng.expovariate(1.0)
    yield mean_interval * count * 5.0


@dataclass
class QueueStats:
    """Counters for intervals spent in a queue and for queue lengths seen."""

    out_num: int = 0
    interval_sum: float = 0.0
    interval_sqsum: float = 0.0
    queued_num: int = 0

    def log(self, interval: float) -> None:
        self.out_num += 1
        self.interval_sum += interval
        self.interval_sqsum += interval * interval

    def mean(self) -> float:
        if self.out_num == 0:
            raise ValueError("no intervals logged")
        return self.interval_sum / self.out_num

    def variance(self) -> float:
        average = self.mean()
        return self.interval_sqsum / self.out_num - average * average

    def delay_count(
        self, departures_base: Iterable[float], departures: Iterable[float], count: int
    ) -> None:
        """Add up how many packets are still queued at each of ``count`` arrivals.

        ``departures_base`` holds the arrival times, ``departures`` the matching
        departure times, both in order.
        """
        arrivals = iter(departures_base)
        leaving = iter(departures)
        head = _take(leaving)
        waiting = -1
        for _ in range(count):
            waiting += 1
            base = _take(arrivals)
            while base >= head:
                waiting -= 1
                head = _take(leaving)
            self.queued_num += waiting
            self.out_num += 1


def serve(
    arrivals: Iterable[float],
    mean_service: float = 0.5,
    stats: QueueStats | None = None,
    rng: random.Random | None = None,
) -> Iterator[float]:
    """Yield departure times of a single FIFO server with exponential service."""
    rng = rng if rng is not None else random.Random()
    stats = stats if stats is not None else QueueStats()
    busy_until = 0.0
    for arrival in arrivals:
        if arrival > busy_until:
            busy_until = arrival
        busy_until += mean_service * rng.expovariate(1.0)
        stats.log(busy_until - arrival)
        yield busy_until


def simulate(repeat: int = 10000, seed: int | None = 2) -> tuple[float, float, float]:
    """Run three merged sources through one queue.

    Returns the mean and variance of the time spent in the queue and the
    average number of packets found waiting by an arrival.
    """
    if repeat < 1:
        raise ValueError("repeat must be at least 1")
    rng = random.Random(seed)
    sources = [generate(repeat, 2.0, rng) for _ in range(3)]
    arrivals = list(combine(sources, repeat))
    service = QueueStats()
    departures = list(serve(arrivals, 0.5, service, rng))
    backlog = QueueStats()
    backlog.delay_count(arrivals, departures, len(arrivals))
    return service.mean(), service.variance(), backlog.queued_num / backlog.out_num


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate a merged-stream queue.")
    parser.add_argument("--repeat", type=int, default=10000, help="packets per source")
    parser.add_argument("--seed", type=int, default=2, help="random seed")
    args = parser.parse_args(argv)
    mean, variance, queued = simulate(args.repeat, args.seed)
    print(f"Ave {mean:f}")
    print(f"Var {variance:f}")
    print(f"Queued Num Ave {queued:f}")
    return 0