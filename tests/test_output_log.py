from __future__ import annotations

import threading

from slowhttp_launcher.output_log import OutputLog


def test_append_snapshot_clear():
    log = OutputLog()
    log.append("a")
    log.extend(["b", "c"])
    assert log.snapshot() == ["a", "b", "c"]
    assert log.text() == "a\nb\nc"
    assert len(log) == 3

    log.clear()
    assert log.snapshot() == []
    assert log.text() == ""


def test_snapshot_is_a_copy():
    log = OutputLog()
    log.append("a")
    snap = log.snapshot()
    log.append("b")
    assert snap == ["a"]


def test_concurrent_writers_keep_their_own_order():
    log = OutputLog()
    writers = 4
    per_writer = 2000
    start = threading.Event()

    def write(w: int) -> None:
        start.wait()
        for n in range(per_writer):
            log.append(f"{w}:{n}")

    threads = [threading.Thread(target=write, args=(w,)) for w in range(writers)]
    for t in threads:
        t.start()
    start.set()
    for t in threads:
        t.join()

    lines = log.snapshot()
    assert len(lines) == writers * per_writer
    for w in range(writers):
        mine = [int(line.split(":")[1]) for line in lines if line.startswith(f"{w}:")]
        assert mine == list(range(per_writer))


def test_clear_starts_a_new_generation():
    log = OutputLog()
    first = log.clear()
    assert log.append("run 1", first)

    second = log.clear()
    assert second == log.generation
    assert second != first
    assert log.append("run 2", second)
    assert not log.append("late from run 1", first)
    assert not log.extend(["more", "late"], first)
    assert log.append("untagged")
    assert log.snapshot() == ["run 2", "untagged"]
