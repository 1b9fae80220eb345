"""Fibonacci generator, filter and collector nodes joined by queues."""

from __future__ import annotations

import argparse
import enum
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Sequence

DEFAULT_COUNT = 20
DEFAULT_MIN_VALUE = 0
DEFAULT_MAX_VALUE = 1000000

_CLOSED = object()

Channel = "queue.Queue[Any]"


class NodeStatus(enum.Enum):
    """Lifecycle state of a node."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NodeMetadata:
    """Name, type and labels that identify a node."""

    name: str
    node_type: str
    labels: dict[str, str] = field(default_factory=dict)


def _int_param(params: dict[str, Any], name: str, default: int) -> int:
    value = params.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


def _receive(channel: "queue.Queue[Any]") -> Iterator[Any]:
    """Yield items from a channel until it is closed."""
    while (item := channel.get()) is not _CLOSED:
        yield item


def _close(channel: "queue.Queue[Any]") -> None:
    channel.put(_CLOSED)


class _FibonacciNode:
    """State shared by every Fibonacci node."""

    def __init__(self, metadata: NodeMetadata, params: dict[str, Any] | None) -> None:
        self.metadata = metadata
        self.params: dict[str, Any] = dict(params or {})
        self.total_processed = 0
        self.status = NodeStatus.IDLE
        self.state: dict[str, Any] = {}

    def store_state(self, key: str, value: Any) -> None:
        self.state[key] = value


class FibonacciGenerator(_FibonacciNode):
    """Emits the first ``count`` Fibonacci numbers, starting from 0."""

    def __init__(self, metadata: NodeMetadata, params: dict[str, Any] | None = None) -> None:
        super().__init__(metadata, params)
        self.count = _int_param(self.params, "count", DEFAULT_COUNT)

    def run(
        self, inputs: Sequence["queue.Queue[Any]"], outputs: Sequence["queue.Queue[Any]"]
    ) -> None:
        if not outputs:
            return
        out = outputs[0]
        a, b = 0, 1
        for _ in range(self.count):
            out.put(a)
            a, b = b, a + b
        _close(out)


class FibonacciFilter(_FibonacciNode):
    """Passes on the numbers between ``min_value`` and ``max_value`` inclusive."""

    def __init__(self, metadata: NodeMetadata, params: dict[str, Any] | None = None) -> None:
        super().__init__(metadata, params)
        self.min_value = _int_param(self.params, "min_value", DEFAULT_MIN_VALUE)
        self.max_value = _int_param(self.params, "max_value", DEFAULT_MAX_VALUE)

    def run(
        self, inputs: Sequence["queue.Queue[Any]"], outputs: Sequence["queue.Queue[Any]"]
    ) -> None:
        if not inputs or not outputs:
            return
        out = outputs[0]
        for value in _receive(inputs[0]):
            if isinstance(value, bool) or not isinstance(value, int):
                continue
            if self.min_value <= value <= self.max_value:
                out.put(value)
            self.total_processed += 1
        _close(out)


class FibonacciSink(_FibonacciNode):
    """Collects and prints the numbers that reach it."""

    def __init__(self, metadata: NodeMetadata, params: dict[str, Any] | None = None) -> None:
        super().__init__(metadata, params)
        self.numbers: list[int] = []

    def run(
        self, inputs: Sequence["queue.Queue[Any]"], outputs: Sequence["queue.Queue[Any]"]
    ) -> None:
        if not inputs:
            return
        print("Fibonacci numbers:")
        for value in _receive(inputs[0]):
            if isinstance(value, bool) or not isinstance(value, int):
                continue
            self.numbers.append(value)
            print(f"{value} ", end="")
            self.total_processed += 1
        print(f"\n\nTotal fibonacci numbers collected: {len(self.numbers)}")
        self.store_state("numbers", list(self.numbers))
        self.store_state("count", len(self.numbers))


def fibonacci_node_factories() -> dict[
    str, Callable[[NodeMetadata, dict[str, Any]], _FibonacciNode]
]:
    """Map Fibonacci node type names to their constructors."""
    return {
        "fibonacci_generator": FibonacciGenerator,
        "fibonacci_filter": FibonacciFilter,
        "fibonacci_sink": FibonacciSink,
    }


def run_chain(
    count: int = 15, min_value: int = 1, max_value: int = 100
) -> dict[str, _FibonacciNode]:
    """Run generator, filter and sink in a line; return the nodes by name."""
    factories = fibonacci_node_factories()
    nodes: dict[str, _FibonacciNode] = {
        "sequence": factories["fibonacci_generator"](
            NodeMetadata("sequence", "fibonacci_generator", {"role": "source"}),
            {"count": count},
        ),
        "filter": factories["fibonacci_filter"](
            NodeMetadata("filter", "fibonacci_filter", {"role": "filter"}),
            {"min_value": min_value, "max_value": max_value},
        ),
        "sink": factories["fibonacci_sink"](
            NodeMetadata("sink", "fibonacci_sink", {"role": "collector"}), {}
        ),
    }
    generated: "queue.Queue[Any]" = queue.Queue()
    filtered: "queue.Queue[Any]" = queue.Queue()
    wiring = {
        "sequence": ([], [generated]),
        "filter": ([generated], [filtered]),
        "sink": ([filtered], []),
    }
    for node in nodes.values():
        node.status = NodeStatus.RUNNING

    def run_node(name: str) -> None:
        inputs, outputs = wiring[name]
        nodes[name].run(inputs, outputs)
        nodes[name].status = NodeStatus.COMPLETED

    threads = [
        threading.Thread(target=run_node, args=(name,), daemon=True)
        for name in ("sequence", "filter")
    ]
    for thread in threads:
        thread.start()
    run_node("sink")
    for thread in threads:
        thread.join()
    return nodes


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate and filter Fibonacci numbers.")
    parser.add_argument("--count", type=int, default=15, help="numbers to generate")
    parser.add_argument("--min", dest="min_value", type=int, default=1, help="smallest kept")
    parser.add_argument("--max", dest="max_value", type=int, default=100, help="largest kept")
    args = parser.parse_args(argv)
    print("Executing fibonacci sequence...")
    nodes = run_chain(args.count, args.min_value, args.max_value)
    print("\nFinal Node States:")
    for name, node in nodes.items():
        print(f"  {name}: {node.status} (processed: {node.total_processed})")
    return 0