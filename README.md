# gochain

Processing stages that can be wired together into chains and small networks,
together with a few ready-made chains that use them. The package uses only the
standard library.

## Modules

- **`gochain.qnet`**: an open queueing network. `generate` yields arrival
  times with exponential gaps, `junction` and `combine` merge time-ordered
  streams, and `serve` runs arrivals through one FIFO server and records
  statistics in a `QueueStats`. `QueueStats.delay_count` counts how many
  packets each arrival finds waiting. `simulate(repeat, seed)` merges three
  sources, serves them and returns the mean and variance of the time in the
  queue and the average number of packets found waiting.
- **`gochain.simple_qnet`**: closure-based stages that exchange `Packet`
  values through `queue.Queue` objects: `generator`, `queue_stage`,
  `combiner` (merges two streams in time order) and `sink`. A packet with a
  negative id ends a stream. `run_until_done` calls a stage until it reports
  completion, and `simple_node_factories` maps the type names `sequence`,
  `queue`, `combiner` and `sink` to factories that build stages from a
  parameter dictionary.
- **`gochain.paths`**: nodes with any number of named input and output paths
  (`PathInfo`, `Paths`), each of which can be switched on or off.
  `EnhancedGeneratorNode`, `EnhancedQueueNode`, `EnhancedCombinerNode` and
  `EnhancedSinkNode` keep their own statistics (`stats()`) and declare their
  `ConnectivityMetadata`. `validate_connectivity` raises `ConnectivityError`
  when a node has too few or too many paths, and `connectivity_info` looks up
  the rules for a node type name.
- **`gochain.chain_qnet`**: a queueing network built from Python generators:
  `generate`, `QueueStage`, `random_filter`, a time-ordered `combine` that
  renumbers packets, and `split`, which copies a stream. `simulate(seed)`
  returns the average delay reported by every queue stage, and
  `run_linear_chain(count, seed)` returns how many packets reach the end of a
  two-queue line.
- **`gochain.prime`**: prime sieve stages working on `PrimeTuple` values:
  `prime_generator`, `prime_filter`, `prime_detector` and `PrimeCollector`,
  plus `prime_node_factories` to build them from parameter dictionaries.
- **`gochain.fibonacci`**: `FibonacciGenerator`, `FibonacciFilter` and
  `FibonacciSink` nodes joined by queues. `run_chain` runs all three in a line
  and returns the nodes by name.
- **`gochain.mece`**: `find_gaps(ideas, target)` returns the parts of a target
  `Area` that a list of ideas, taken in order, leaves uncovered.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Using it from Python

```python
from gochain.qnet import simulate
from gochain.fibonacci import run_chain
from gochain.mece import Area, find_gaps
from gochain.paths import ConnectivityError, EnhancedQueueNode, validate_connectivity

mean, variance, queued = simulate(repeat=1000, seed=2)

nodes = run_chain(count=15, min_value=1, max_value=100)
print(nodes["sink"].numbers)   # [1, 1, 2, 3, 5, 8, 13, 21, 34, 55, 89]

find_gaps([Area(10, 20), Area(20, 30)], Area(0, 100))
# [Area(low=0, high=10), Area(low=30, high=100)]

try:
    validate_connectivity(EnhancedQueueNode(0.5), 0, 1)
except ConnectivityError as error:
    print(error)   # node queue requires 1 inputs, got 0
```

The random simulations accept a seed or a `random.Random` instance, so runs
can be repeated exactly.

## Commands

```
gochain-qnet [--repeat N] [--seed S]          # three merged streams through one queue
gochain-chain-qnet [--seed S] [--linear COUNT] # queues, merge and split built from stream stages
gochain-fibonacci [--count N] [--min A] [--max B]  # generate, filter and collect Fibonacci numbers
```

## What the package does not do

- There is no command for the prime sieve, the path-based nodes or the
  coverage-gap search; these are used from Python only.
- Networks are wired by hand in Python. The package does not read network
  descriptions from configuration files, and the factory mappings
  (`simple_node_factories`, `prime_node_factories`,
  `fibonacci_node_factories`) only build stages; they do not connect them.