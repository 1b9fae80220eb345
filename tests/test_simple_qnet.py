import queue
import random

import pytest

from gochain.simple_qnet import (
    Packet,
    combiner,
    generator,
    queue_stage,
    run_until_done,
    simple_node_factories,
    sink,
)


def drain(channel):
    items = []
    while not channel.empty():
        items.append(channel.get())
    return items


def fill(packets):
    channel = queue.Queue()
    for packet in packets:
        channel.put(packet)
    return channel


def test_packet_end_marker():
    assert Packet(-1, 0.0).is_end()
    assert not Packet(3, 1.5).is_end()


def test_generator_emits_count_then_end():
    out = queue.Queue()
    run_until_done(generator(1.0, 5, random.Random(1)), None, out)
    packets = drain(out)
    assert len(packets) == 6
    assert packets[-1].is_end()
    assert [p.id for p in packets[:-1]] == [1, 2, 3, 4, 5]
    times = [p.time for p in packets[:-1]]
    assert times == sorted(times)


def test_queue_stage_delays_and_keeps_ids(capsys):
    arrivals = [Packet(1, 0.0), Packet(2, 0.5), Packet(3, 4.0), Packet(-1, 0.0)]
    out = queue.Queue()
    run_until_done(queue_stage(0.5, random.Random(2)), fill(arrivals), out)
    packets = drain(out)
    assert packets[-1].is_end()
    assert [p.id for p in packets[:-1]] == [1, 2, 3]
    assert all(d.time > a.time for a, d in zip(arrivals, packets[:-1]))
    assert "[QUEUE] Service: 0.50" in capsys.readouterr().out


def test_queue_stage_silent_without_packets(capsys):
    out = queue.Queue()
    run_until_done(queue_stage(0.5, random.Random(2)), fill([Packet(-1, 0.0)]), out)
    assert drain(out)[0].is_end()
    assert capsys.readouterr().out == ""


def test_combiner_merges_in_time_order():
    first = fill([Packet(1, 1.0), Packet(2, 3.0), Packet(-1, 0.0)])
    second = fill([Packet(1, 2.0), Packet(-1, 0.0)])
    out = queue.Queue()
    run_until_done(combiner(), first, second, out)
    packets = drain(out)
    assert packets[-1].is_end()
    assert [p.time for p in packets[:-1]] == [1.0, 2.0, 3.0]


def test_combiner_prefers_first_on_tie():
    first = fill([Packet(7, 1.0), Packet(-1, 0.0)])
    second = fill([Packet(8, 1.0), Packet(-1, 0.0)])
    out = queue.Queue()
    run_until_done(combiner(), first, second, out)
    assert [p.id for p in drain(out)[:-1]] == [7, 8]


def test_sink_reports_end():
    step = sink()
    channel = fill([Packet(1, 1.0), Packet(-1, 0.0)])
    assert step(channel) is False
    assert step(channel) is True


def test_factories_build_a_working_chain():
    factories = simple_node_factories(random.Random(9))
    source = factories["sequence"]({"rate": 1.0, "count": 3.0})
    server = factories["queue"]({"service_time": 0.2})
    a, b = queue.Queue(), queue.Queue()
    run_until_done(source, None, a)
    run_until_done(server, a, b)
    packets = drain(b)
    assert len(packets) == 4
    assert packets[-1].is_end()


def test_factory_missing_count_generates_nothing():
    source = simple_node_factories()["sequence"]({"rate": 1.0})
    out = queue.Queue()
    run_until_done(source, None, out)
    packets = drain(out)
    assert len(packets) == 1 and packets[0].is_end()


def test_factory_missing_rate_raises():
    with pytest.raises(KeyError):
        simple_node_factories()["sequence"]({"count": 2})


def test_factory_bad_service_time_raises():
    with pytest.raises(TypeError):
        simple_node_factories()["queue"]({"service_time": "fast"})