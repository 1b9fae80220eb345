"""Queueing network nodes wired through named, switchable input and output paths."""

from __future__ import annotations

import queue
import random
from dataclasses import dataclass, field
from typing import Any, Iterator

from gochain.simple_qnet import END, Packet

UNLIMITED = -1
PATH_CAPACITY = 10


class ConnectivityError(ValueError):
    """Raised when a node's paths do not fit its connectivity rules."""


@dataclass
class PathInfo:
    """One input or output of a node: a channel, a name and an on/off switch."""

    channel: "queue.Queue[Any] | None" = None
    name: str = ""
    active: bool = False


@dataclass
class Paths:
    """The input and output paths of a node."""

    inputs: list[PathInfo] = field(default_factory=list)
    outputs: list[PathInfo] = field(default_factory=list)

    def in_count(self) -> int:
        return len(self.inputs)

    def out_count(self) -> int:
        return len(self.outputs)

    def active_in_count(self) -> int:
        return sum(1 for path in self.inputs if path.active)

    def active_out_count(self) -> int:
        return sum(1 for path in self.outputs if path.active)


@dataclass(frozen=True)
class ConnectivityMetadata:
    """How many inputs and outputs a node type needs and allows (-1: no limit)."""

    required_inputs: int
    required_outputs: int
    max_inputs: int
    max_outputs: int
    node_type: str
    description: str


GENERATOR_CONNECTIVITY = ConnectivityMetadata(
    required_inputs=0,
    required_outputs=0,
    max_inputs=0,
    max_outputs=1,
    node_type="sequence",
    description="Generates packets at specified rate",
)

QUEUE_CONNECTIVITY = ConnectivityMetadata(
    required_inputs=1,
    required_outputs=1,
    max_inputs=1,
    max_outputs=1,
    node_type="queue",
    description="Processes packets with service time delay",
)

COMBINER_CONNECTIVITY = ConnectivityMetadata(
    required_inputs=2,
    required_outputs=1,
    max_inputs=UNLIMITED,
    max_outputs=1,
    node_type="combiner",
    description="Merges multiple input streams in chronological order",
)

SINK_CONNECTIVITY = ConnectivityMetadata(
    required_inputs=1,
    required_outputs=0,
    max_inputs=UNLIMITED,
    max_outputs=0,
    node_type="sink",
    description="Consumes packets and provides statistics",
)

_CONNECTIVITY_BY_TYPE = {
    meta.node_type: meta
    for meta in (
        GENERATOR_CONNECTIVITY,
        QUEUE_CONNECTIVITY,
        COMBINER_CONNECTIVITY,
        SINK_CONNECTIVITY,
    )
}


def validate_connectivity(node: Any, in_count: int, out_count: int) -> None:
    """Raise ConnectivityError unless the counts fit ``node.connectivity``."""
    meta: ConnectivityMetadata = node.connectivity
    if in_count < meta.required_inputs:
        raise ConnectivityError(
            f"node {meta.node_type} requires {meta.required_inputs} inputs, got {in_count}"
        )
    if out_count < meta.required_outputs:
        raise ConnectivityError(
            f"node {meta.node_type} requires {meta.required_outputs} outputs, got {out_count}"
        )
    if meta.max_inputs >= 0 and in_count > meta.max_inputs:
        raise ConnectivityError(
            f"node {meta.node_type} allows max {meta.max_inputs} inputs, got {in_count}"
        )
    if meta.max_outputs >= 0 and out_count > meta.max_outputs:
        raise ConnectivityError(
            f"node {meta.node_type} allows max {meta.max_outputs} outputs, got {out_count}"
        )


def connectivity_info(node_type: str) -> ConnectivityMetadata:
    """Return the connectivity rules for a node type name."""
    try:
        return _CONNECTIVITY_BY_TYPE[node_type]
    except KeyError:
        raise ConnectivityError(f"unknown node type: {node_type}") from None


def _open_path(name: str) -> PathInfo:
    return PathInfo(queue.Queue(maxsize=PATH_CAPACITY), name, True)


def _build_paths(in_count: int, out_count: int) -> Paths:
    if in_count < 0 or out_count < 0:
        raise ConnectivityError("path counts must not be negative")
    return Paths(
        inputs=[PathInfo() for _ in range(in_count)],
        outputs=[PathInfo() for _ in range(out_count)],
    )


def _active(paths: list[PathInfo]) -> Iterator[PathInfo]:
    return (path for path in paths if path.active)


def _broadcast(paths: Paths, packet: Packet) -> None:
    for path in _active(paths.outputs):
        path.channel.put(packet)


def _read_first_active(paths: Paths) -> Packet:
    for path in _active(paths.inputs):
        return path.channel.get()
    raise ConnectivityError("no active input path")


def _path_stats(paths: Paths) -> dict[str, int]:
    return {
        "input_paths": paths.in_count(),
        "output_paths": paths.out_count(),
        "active_in_paths": paths.active_in_count(),
        "active_out_paths": paths.active_out_count(),
    }


class EnhancedGeneratorNode:
    """Creates ``count`` packets with exponential gaps of mean ``rate``."""

    node_type = "sequence"
    connectivity = GENERATOR_CONNECTIVITY

    def __init__(self, rate: float, count: int, rng: random.Random | None = None) -> None:
        self.rate = rate
        self.count = count
        self.rng = rng if rng is not None else random.Random()
        self.current = 0
        self.clock = 0.0
        self.paths = Paths()
        self.initialize_paths(0, 1)

    def initialize_paths(self, in_count: int, out_count: int) -> None:
        self.paths = _build_paths(in_count, out_count)
        if out_count > 0:
            self.paths.outputs[0] = _open_path("output")

    def stats(self) -> dict[str, Any]:
        return {
            "rate": self.rate,
            "count": self.count,
            "generated": self.current,
            **_path_stats(self.paths),
        }

    def process(self, paths: Paths) -> bool:
        if self.current >= self.count:
            _broadcast(paths, END)
            print(
                f"[GENERATOR] Generated {self.current} packets on "
                f"{paths.active_out_count()} output paths"
            )
            return True
        self.current += 1
        self.clock += self.rate * self.rng.expovariate(1.0)
        _broadcast(paths, Packet(self.current, self.clock))
        return False


class EnhancedQueueNode:
    """A single FIFO server with exponential service of mean ``service_time``."""

    node_type = "queue"
    connectivity = QUEUE_CONNECTIVITY

    def __init__(self, service_time: float, rng: random.Random | None = None) -> None:
        self.service_time = service_time
        self.rng = rng if rng is not None else random.Random()
        self.queue_time = 0.0
        self.processed = 0
        self.total_delay = 0.0
        self.paths = Paths()
        self.initialize_paths(1, 1)

    def initialize_paths(self, in_count: int, out_count: int) -> None:
        self.paths = _build_paths(in_count, out_count)
        if in_count > 0:
            self.paths.inputs[0] = _open_path("input")
        if out_count > 0:
            self.paths.outputs[0] = _open_path("output")

    def _average_delay(self) -> float:
        return self.total_delay / self.processed if self.processed > 0 else 0.0

    def stats(self) -> dict[str, Any]:
        return {
            "service_time": self.service_time,
            "processed": self.processed,
            "average_delay": self._average_delay(),
            **_path_stats(self.paths),
        }

    def process(self, paths: Paths) -> bool:
        packet = _read_first_active(paths)
        if packet.is_end():
            print(
                f"[QUEUE] Service: {self.service_time:.2f}s, "
                f"Processed: {self.processed} packets, "
                f"Average Wait Time: {self._average_delay():.3f}s, "
                f"Paths: {paths.active_in_count()}In/{paths.active_out_count()}Out"
            )
            _broadcast(paths, packet)
            return True
        if packet.time > self.queue_time:
            self.queue_time = packet.time
        self.queue_time += self.service_time * self.rng.expovariate(1.0)
        self.total_delay += self.queue_time - packet.time
        self.processed += 1
        _broadcast(paths, Packet(packet.id, self.queue_time))
        return False


class EnhancedCombinerNode:
    """Merges any number of input streams in time order."""

    node_type = "combiner"
    connectivity = COMBINER_CONNECTIVITY

    def __init__(self, input_count: int) -> None:
        self.merged = 0
        self._buffered: list[Packet | None] = []
        self._ended: list[bool] = []
        self.paths = Paths()
        self.initialize_paths(input_count, 1)

    def initialize_paths(self, in_count: int, out_count: int) -> None:
        self.paths = _build_paths(in_count, out_count)
        self._buffered = [None] * in_count
        self._ended = [False] * in_count
        for index in range(in_count):
            self.paths.inputs[index] = _open_path(f"input_{index}")
        if out_count > 0:
            self.paths.outputs[0] = _open_path("output")

    def stats(self) -> dict[str, Any]:
        return {
            "merged_packets": self.merged,
            **_path_stats(self.paths),
            "streams_ended": sum(self._ended),
        }

    def process(self, paths: Paths) -> bool:
        if paths.in_count() != len(self._buffered):
            raise ConnectivityError(
                f"combiner initialized for {len(self._buffered)} inputs, "
                f"got {paths.in_count()}"
            )
        for index, path in enumerate(paths.inputs):
            if path.active and not self._ended[index] and self._buffered[index] is None:
                packet = path.channel.get()
                if packet.is_end():
                    self._ended[index] = True
                else:
                    self._buffered[index] = packet

        if all(self._ended):
            print(
                f"[COMBINER] Merged {self.merged} packets from "
                f"{paths.active_in_count()} input paths"
            )
            _broadcast(paths, END)
            return True

        candidates = [
            (packet.time, index)
            for index, packet in enumerate(self._buffered)
            if packet is not None and not self._ended[index]
        ]
        if not candidates:
            return False
        _, earliest = min(candidates, key=lambda item: item[0])
        selected = self._buffered[earliest]
        self._buffered[earliest] = None
        self.merged += 1
        _broadcast(paths, selected)
        return False


class EnhancedSinkNode:
    """Consumes packets and records how many arrived and when the last did."""

    node_type = "sink"
    connectivity = SINK_CONNECTIVITY

    def __init__(self, input_count: int) -> None:
        self.received = 0
        self.last_time = 0.0
        self.paths = Paths()
        self.initialize_paths(input_count, 0)

    def initialize_paths(self, in_count: int, out_count: int) -> None:
        self.paths = _build_paths(in_count, out_count)
        for index in range(in_count):
            self.paths.inputs[index] = _open_path(f"input_{index}")

    def stats(self) -> dict[str, Any]:
        return {
            "received": self.received,
            "last_time": self.last_time,
            **_path_stats(self.paths),
        }

    def process(self, paths: Paths) -> bool:
        packet = _read_first_active(paths)
        if packet.is_end():
            print(
                f"[SINK] Total received: {self.received} packets via "
                f"{paths.in_count()} input paths"
            )
            return True
        self.received += 1
        self.last_time = packet.time
        return False