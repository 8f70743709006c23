from __future__ import annotations

import threading

import pytest

from twiml_server.routing.ids import ID_WIDTH, MAX_SEQUENCE, MAX_WORKER_ID, FlakeIdGenerator


def test_sequential_ids_are_unique_and_increasing():
    generator = FlakeIdGenerator(worker_id=1)
    ids = [generator.next_int() for _ in range(10_000)]
    assert len(set(ids)) == len(ids)
    assert ids == sorted(ids)


def test_ids_are_url_safe_strings():
    identifier = FlakeIdGenerator().next()
    assert identifier.isdigit()


def test_ids_are_unique_across_threads():
    generator = FlakeIdGenerator(worker_id=7)
    results: list[list[str]] = [[] for _ in range(8)]

    def worker(bucket: list[str]) -> None:
        for _ in range(2_000):
            bucket.append(generator.next())

    threads = [threading.Thread(target=worker, args=(bucket,)) for bucket in results]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    all_ids = [identifier for bucket in results for identifier in bucket]
    assert len(all_ids) == 16_000
    assert len(set(all_ids)) == len(all_ids)


def test_same_millisecond_uses_sequence():
    generator = FlakeIdGenerator(worker_id=0, clock=lambda: 1_700_000_000_000)
    first = generator.next_int()
    second = generator.next_int()
    assert second == first + 1
    assert first & MAX_SEQUENCE == 0


def test_clock_moving_backwards_does_not_repeat_ids():
    ticks = iter([1_700_000_000_005, 1_700_000_000_001, 1_700_000_000_010])
    generator = FlakeIdGenerator(worker_id=3, clock=lambda: next(ticks))
    ids = [generator.next_int() for _ in range(3)]
    assert len(set(ids)) == 3
    assert ids == sorted(ids)


def test_worker_id_is_validated():
    with pytest.raises(ValueError):
        FlakeIdGenerator(worker_id=MAX_WORKER_ID + 1)


def test_ids_are_fixed_width_so_text_order_matches_creation_order():
    ticks = iter([1_700_000_000_000, 1_700_000_000_001, 1_700_000_000_002])
    generator = FlakeIdGenerator(worker_id=5, clock=lambda: next(ticks))
    ids = [generator.next() for _ in range(3)]
    assert all(len(identifier) == ID_WIDTH for identifier in ids)
    assert ids == sorted(ids)
    assert int(ids[0]) < int(ids[1]) < int(ids[2])


def test_exhausted_sequence_borrows_next_millisecond_without_waiting():
    # A frozen clock would spin forever if exhaustion waited on it.
    generator = FlakeIdGenerator(worker_id=2, clock=lambda: 1_700_000_000_000)
    ids = [generator.next_int() for _ in range(MAX_SEQUENCE + 10)]
    assert len(set(ids)) == len(ids)
    assert ids == sorted(ids)
