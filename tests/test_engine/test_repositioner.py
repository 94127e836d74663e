"""Tests for contiguous-block repositioning."""

from __future__ import annotations

import pytest

from tabsort.constants import MoveOutcome
from tabsort.engine.repositioner import reposition, target_start
from tabsort.host.memory import InMemoryTabHost
from tabsort.models.tab import Selection, Tab
from tabsort.resilience.errors import MoveFailed


def _window(count: int) -> list[Tab]:
    return [Tab(id=i, index=i, url=f"https://t{i}.test") for i in range(count)]


async def _selection(host: InMemoryTabHost) -> Selection:
    return Selection.from_tabs(await host.query_selected())


def test_target_start_ends_block_at_rightmost() -> None:
    sel = Selection.from_tabs(
        [Tab(id=1, index=5), Tab(id=2, index=7), Tab(id=3, index=9)]
    )
    assert target_start(sel, 3) == 7


@pytest.mark.asyncio
async def test_sequential_moves_back_to_front() -> None:
    """Tabs at 5, 7, 9 reordered [9, 5, 7] land on 7, 8, 9."""
    host = InMemoryTabHost(
        _window(10), selected=[5, 7, 9], batch_moves=False
    )
    sel = await _selection(host)

    results = await reposition(host, sel, [9, 5, 7])

    assert host.move_log == [(7, 9), (5, 8), (9, 7)]
    assert host.order[7:] == [9, 5, 7]
    assert host.order[:5] == [0, 1, 2, 3, 4]
    assert [r.tab_id for r in results] == [9, 5, 7]
    assert all(r.ok for r in results)


@pytest.mark.asyncio
async def test_batch_move_single_request() -> None:
    host = InMemoryTabHost(_window(10), selected=[5, 7, 9])
    sel = await _selection(host)

    results = await reposition(host, sel, [9, 5, 7])

    assert host.batch_log == [([9, 5, 7], 7)]
    assert host.move_log == []
    assert host.order[7:] == [9, 5, 7]
    assert all(r.outcome == MoveOutcome.MOVED for r in results)


@pytest.mark.asyncio
async def test_batch_disabled_uses_sequential() -> None:
    host = InMemoryTabHost(_window(4), selected=[1, 3])
    sel = await _selection(host)

    await reposition(host, sel, [3, 1], batch=False)

    assert host.batch_log == []
    assert host.move_log == [(1, 3), (3, 2)]
    assert host.order == [0, 2, 3, 1]


@pytest.mark.asyncio
async def test_sequential_and_batch_agree() -> None:
    ordered = [6, 2, 0, 4]
    seq = InMemoryTabHost(
        _window(8), selected=[0, 2, 4, 6], batch_moves=False
    )
    bat = InMemoryTabHost(_window(8), selected=[0, 2, 4, 6])
    await reposition(seq, await _selection(seq), ordered)
    await reposition(bat, await _selection(bat), ordered)
    assert seq.order == bat.order
    assert seq.order[3:7] == ordered


@pytest.mark.asyncio
async def test_one_failed_move_does_not_stop_the_rest() -> None:
    host = InMemoryTabHost(
        _window(6), selected=[1, 3, 5], batch_moves=False
    )
    host.fail_moves[3] = MoveFailed(3, "tab is being dragged")
    sel = await _selection(host)

    results = await reposition(host, sel, [5, 3, 1])

    assert [tid for tid, _ in host.move_log] == [1, 3, 5]
    by_id = {r.tab_id: r for r in results}
    assert by_id[3].outcome == MoveOutcome.FAILED
    assert by_id[3].reason is not None
    assert "dragged" in by_id[3].reason
    assert by_id[1].ok and by_id[5].ok


@pytest.mark.asyncio
async def test_batch_failure_fails_every_tab() -> None:
    host = InMemoryTabHost(_window(4), selected=[0, 1, 2])
    host.fail_batch = ConnectionError("host went away")
    sel = await _selection(host)

    results = await reposition(host, sel, [2, 1, 0])

    assert [r.outcome for r in results] == [MoveOutcome.FAILED] * 3
    assert {r.reason for r in results} == {
        "disconnected: host went away"
    }
    assert host.order == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_closed_tab_reason_is_not_found() -> None:
    host = InMemoryTabHost(
        _window(3), selected=[0, 1, 2], batch_moves=False
    )
    host.fail_moves[0] = MoveFailed(0, "No tab with id: 0")
    sel = await _selection(host)
    results = await reposition(host, sel, [2, 1, 0])
    failed = [r for r in results if not r.ok]
    assert len(failed) == 1
    assert failed[0].reason is not None
    assert failed[0].reason.startswith("not_found:")


@pytest.mark.asyncio
async def test_rejects_ids_outside_selection() -> None:
    host = InMemoryTabHost(_window(4), selected=[1, 2])
    sel = await _selection(host)
    with pytest.raises(ValueError, match="permutation"):
        await reposition(host, sel, [1, 3])
    with pytest.raises(ValueError, match="permutation"):
        await reposition(host, sel, [1, 1])


@pytest.mark.asyncio
async def test_empty_selection_moves_nothing() -> None:
    host = InMemoryTabHost(_window(2), selected=[])
    results = await reposition(host, Selection(), [])
    assert results == []
    assert host.move_log == [] and host.batch_log == []
