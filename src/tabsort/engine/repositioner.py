"""Move the sorted tabs into a contiguous block.

The block ends at the rightmost selected index, so tabs to the left
of the selection are never disturbed.

Non-atomic and best-effort: the tab strip is shared with the user and
other extensions, and the host offers no lock. A concurrent reorder
during the moves can leave a scrambled block.
"""

from __future__ import annotations

import logging

from tabsort.host.protocols import TabHost
from tabsort.models.moves import MoveResult
from tabsort.models.tab import Selection, TabId
from tabsort.resilience.errors import describe_error

logger = logging.getLogger(__name__)


def target_start(selection: Selection, count: int) -> int:
    """First index of the destination block."""
    return selection.rightmost_index - count + 1


async def reposition(
    host: TabHost,
    selection: Selection,
    ordered_ids: list[TabId],
    *,
    batch: bool = True,
) -> list[MoveResult]:
    """Place ``ordered_ids`` at consecutive indices ending at the
    selection's rightmost index. Results come back in ``ordered_ids``
    order.

    Batched when both ``batch`` and the host allow it; otherwise one
    move per tab, last slot first. Front-to-back single moves would
    shift not-yet-placed tabs under the ones already placed.
    """
    if sorted(ordered_ids) != sorted(selection.ids):
        raise ValueError(
            "ordered_ids must be a permutation of the selection ids"
        )
    if not ordered_ids:
        return []

    start = target_start(selection, len(ordered_ids))
    logger.debug(
        "event=reposition_start start=%d count=%d", start, len(ordered_ids)
    )

    if batch and host.supports_batch_move:
        return await _move_batch(host, ordered_ids, start)
    return await _move_sequential(host, ordered_ids, start)


async def _move_batch(
    host: TabHost, ordered_ids: list[TabId], start: int
) -> list[MoveResult]:
    try:
        await host.move_many(list(ordered_ids), start)
    except Exception as exc:
        reason = describe_error(exc)
        logger.warning(
            "event=batch_move_failed count=%d error=%s",
            len(ordered_ids),
            reason,
        )
        return [MoveResult.failed(tid, reason) for tid in ordered_ids]
    return [MoveResult.moved(tid) for tid in ordered_ids]


async def _move_sequential(
    host: TabHost, ordered_ids: list[TabId], start: int
) -> list[MoveResult]:
    results: dict[TabId, MoveResult] = {}
    for offset in reversed(range(len(ordered_ids))):
        tab_id = ordered_ids[offset]
        try:
            await host.move(tab_id, start + offset)
        except Exception as exc:
            reason = describe_error(exc)
            logger.warning(
                "event=move_failed tab_id=%s index=%d error=%s",
                tab_id,
                start + offset,
                reason,
            )
            results[tab_id] = MoveResult.failed(tab_id, reason)
            continue
        results[tab_id] = MoveResult.moved(tab_id)
    return [results[tid] for tid in ordered_ids]
