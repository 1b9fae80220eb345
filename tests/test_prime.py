import queue

import pytest

from gochain.prime import (
    PrimeCollector,
    PrimeTuple,
    int_param,
    prime_detector,
    prime_filter,
    prime_generator,
    prime_node_factories,
)


def run(step, *args):
    while not step(*args):
        pass


def drain(channel):
    items = []
    while not channel.empty():
        items.append(channel.get())
    return items


def fill(items):
    channel = queue.Queue()
    for item in items:
        channel.put(item)
    return channel


def is_prime(n):
    return n > 1 and all(n % d for d in range(2, int(n ** 0.5) + 1))


def test_end_marker():
    assert PrimeTuple(-1).is_end()
    assert not PrimeTuple(4).is_end()


def test_generator_emits_range_then_end(capsys):
    out = queue.Queue()
    run(prime_generator(2, 5), None, out)
    items = drain(out)
    assert [t.num for t in items[:-1]] == list(range(2, 6))
    assert items[-1].is_end()
    assert "[END] Number generation complete" in capsys.readouterr().out


def test_filter_drops_multiples(capsys):
    out = queue.Queue()
    source = fill([PrimeTuple(n) for n in range(2, 10)] + [PrimeTuple(-1)])
    run(prime_filter(3), source, out)
    items = drain(out)
    assert items[-1].is_end()
    assert all(t.num % 3 != 0 for t in items[:-1])
    assert len(items) - 1 == len([n for n in range(2, 10) if n % 3])
    assert "[FILTER] Prime 3 filter complete" in capsys.readouterr().out


def test_detector_marks_prime():
    out = queue.Queue()
    run(prime_detector(), fill([PrimeTuple(11), PrimeTuple(-1)]), out)
    items = drain(out)
    assert items[0] == PrimeTuple(11, True)
    assert items[-1].is_end()


def test_collector_gathers_only_marked(capsys):
    collector = PrimeCollector()
    source = fill([PrimeTuple(7, True), PrimeTuple(4, False), PrimeTuple(11, True), PrimeTuple(-1)])
    run(collector, source)
    assert collector.primes == [7, 11]
    assert "[COLLECTOR] Found 2 primes: [7 11]" in capsys.readouterr().out


def test_full_sieve_finds_primes_above_filters():
    factories = prime_node_factories()
    channel = queue.Queue()
    run(factories["prime_generator"]({"start": 2, "end": 50.0}), None, channel)
    for p in (2, 3, 5, 7):
        nxt = queue.Queue()
        run(factories["prime_filter"]({"prime": p}), channel, nxt)
        channel = nxt
    detected = queue.Queue()
    run(factories["prime_detector"]({}), channel, detected)
    collector = factories["prime_collector"]({})
    run(collector, detected)
    assert collector.primes == [n for n in range(8, 51) if is_prime(n)]


def test_int_param_accepts_int_and_float():
    assert int_param({"start": 4}, "start") == 4
    assert int_param({"start": 4.0}, "start") == 4


@pytest.mark.parametrize("params", [{}, {"end": "10"}, {"end": True}])
def test_int_param_rejects_bad_values(params):
    with pytest.raises(TypeError, match="Invalid type for end parameter"):
        int_param(params, "end")