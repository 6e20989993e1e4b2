# TG Mirror test scripts
from __future__ import annotations

from tgmirror.mirror.backfill import BackfillEnumerator
from tgmirror.mirror.models import BackfillTask
from tgmirror.store import MediaIndex, TaskQueue

TARGET = "-100999"


def _enum(index: MediaIndex, queue: TaskQueue, chats=("@history",), batch=10, start=10_000_000) -> BackfillEnumerator:
    return BackfillEnumerator(index, queue, destination=TARGET, chats=chats, batch=batch, start=start)


def test_first_run_walks_down_from_sentinel(index: MediaIndex, queue: TaskQueue) -> None:
    pushed = _enum(index, queue).run()

    assert pushed == 10
    tasks = queue.dump()
    assert [t.source_message_id for t in tasks] == list(range(10_000_000, 9_999_990, -1))
    assert all(isinstance(t, BackfillTask) for t in tasks)
    assert all(t.source_channel == "@history" and t.destination_channel == TARGET for t in tasks)
    assert index.get_cursor("@history", -1) == 9_999_990


def test_cursor_after_n_runs(index: MediaIndex, queue: TaskQueue) -> None:
    enum = _enum(index, queue, batch=7, start=50)
    for n in range(1, 12):
        enum.run()
        assert index.get_cursor("@history", -1) == max(50 - n * 7, 0)


def test_near_floor_pushes_fewer_and_clamps(index: MediaIndex, queue: TaskQueue) -> None:
    index.put_cursor("@history", 3)
    pushed = _enum(index, queue).run()

    assert pushed == 3
    assert [t.source_message_id for t in queue.dump()] == [3, 2, 1]
    assert index.get_cursor("@history", -1) == 0


def test_exhausted_channel_stays_idle(index: MediaIndex, queue: TaskQueue) -> None:
    index.put_cursor("@history", 0)
    enum = _enum(index, queue)
    assert enum.run() == 0
    assert enum.run() == 0
    assert len(queue) == 0
    assert index.get_cursor("@history", -1) == 0


def test_no_chats_is_noop(index: MediaIndex, queue: TaskQueue) -> None:
    assert _enum(index, queue, chats=()).run() == 0
    assert len(queue) == 0
    assert index.dump() == []


def test_each_chat_has_its_own_cursor(index: MediaIndex, queue: TaskQueue) -> None:
    index.put_cursor("@b", 4)
    _enum(index, queue, chats=("@a", "@b"), batch=2, start=100).run()

    assert [(t.source_channel, t.source_message_id) for t in queue.dump()] == [
        ("@a", 100),
        ("@a", 99),
        ("@b", 4),
        ("@b", 3),
    ]
    assert index.get_cursor("@a", -1) == 98
    assert index.get_cursor("@b", -1) == 2


def test_missing_destination_skips_backfill(index: MediaIndex, queue: TaskQueue) -> None:
    enum = BackfillEnumerator(index, queue, destination=None, chats=["@history"])
    assert enum.run() == 0
    assert len(queue) == 0
    assert index.dump() == []
