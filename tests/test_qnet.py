import random
import statistics

import pytest

from gochain.qnet import (
    QueueStats,
    combine,
    generate,
    junction,
    main,
    serve,
    simulate,
)


def test_junction_merges_two_sorted_streams():
    first = [1.0, 3.0, 5.0, 100.0]
    second = [2.0, 4.0, 6.0, 100.0]
    merged = list(junction(first, second, 6))
    assert merged == sorted(first[:-1] + second[:-1])


def test_junction_short_stream_raises():
    with pytest.raises(ValueError):
        list(junction([1.0], [2.0], 3))


def test_combine_three_streams_is_sorted_and_complete():
    rng = random.Random(7)
    streams = [list(generate(20, 2.0, rng)) for _ in range(3)]
    merged = list(combine(streams, 20))
    assert len(merged) == 60
    assert merged == sorted(merged)
    expected = sorted(value for stream in streams for value in stream[:-1])
    assert merged == expected


def test_combine_needs_two_streams():
    with pytest.raises(ValueError):
        combine([[0.0, 1.0]], 1)


def test_generate_shape():
    values = list(generate(10, 2.0, random.Random(1)))
    assert len(values) == 11
    assert values[0] == 0.0
    assert values[:-1] == sorted(values[:-1])
    assert values[-1] == 2.0 * 10 * 5.0


def test_queue_stats_mean_and_variance():
    stats = QueueStats()
    samples = [1.0, 3.0, 4.5, 2.5]
    for sample in samples:
        stats.log(sample)
    assert stats.out_num == len(samples)
    assert stats.mean() == pytest.approx(statistics.mean(samples))
    assert stats.variance() == pytest.approx(statistics.pvariance(samples))


def test_queue_stats_mean_without_data_raises():
    with pytest.raises(ValueError):
        QueueStats().mean()


def test_delay_count_counts_waiting_packets():
    stats = QueueStats()
    stats.delay_count([0.0, 1.0, 2.0], [0.5, 3.0, 4.0], 3)
    assert stats.out_num == 3
    assert stats.queued_num == 1


def test_serve_departures_follow_arrivals():
    arrivals = [0.0, 0.1, 0.2, 5.0, 5.1]
    stats = QueueStats()
    departures = list(serve(arrivals, 0.5, stats, random.Random(3)))
    assert len(departures) == len(arrivals)
    assert all(d > a for a, d in zip(arrivals, departures))
    assert departures == sorted(departures)
    assert stats.out_num == len(arrivals)
    assert stats.interval_sum == pytest.approx(
        sum(d - a for a, d in zip(arrivals, departures))
    )


def test_simulate_is_reproducible_and_sane():
    first = simulate(200, 5)
    second = simulate(200, 5)
    assert first == second
    mean, variance, queued = first
    assert mean > 0
    assert variance >= 0
    assert queued >= 0


def test_simulate_rejects_zero_repeat():
    with pytest.raises(ValueError):
        simulate(0, 1)


def test_main_prints_report(capsys):
    assert main(["--repeat", "50", "--seed", "4"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Ave ")
    assert "Var " in out
    assert "Queued Num Ave " in out