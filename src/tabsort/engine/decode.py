"""Decode get-dates responses into a tagged result.

Every payload shape the companion can send ends up as exactly one of
``DecodeOk`` or ``DecodeError``; nothing downstream inspects raw dicts.

Records are validated one at a time. An invalid record is dropped and
its tab keeps the absent date it was seeded with; only a payload whose
every record is invalid counts as malformed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeAlias

from pydantic import BaseModel, ValidationError

from tabsort.constants import ERROR_TRUNCATION_CHARS, DecodeErrorKind
from tabsort.models.dates import TabDate

logger = logging.getLogger(__name__)


class DatesEnvelope(BaseModel):
    data: list[Any]


@dataclass(frozen=True)
class DecodeOk:
    records: list[TabDate]
    dropped: int = 0


@dataclass(frozen=True)
class DecodeError:
    kind: DecodeErrorKind
    detail: str = ""


DecodeResult: TypeAlias = DecodeOk | DecodeError


def decode_response(payload: Any) -> DecodeResult:
    """Validate a raw response payload."""
    if payload is None:
        return DecodeError(DecodeErrorKind.NO_DATA, "empty response")
    if not isinstance(payload, dict):
        return DecodeError(
            DecodeErrorKind.MALFORMED,
            f"expected an object, got {type(payload).__name__}",
        )
    if payload.get("error"):
        return DecodeError(
            DecodeErrorKind.REMOTE_ERROR,
            str(payload["error"])[:ERROR_TRUNCATION_CHARS],
        )
    try:
        envelope = DatesEnvelope.model_validate(payload)
    except ValidationError as exc:
        return DecodeError(
            DecodeErrorKind.MALFORMED,
            str(exc)[:ERROR_TRUNCATION_CHARS],
        )

    records: list[TabDate] = []
    rejected: list[str] = []
    for position, raw in enumerate(envelope.data):
        try:
            records.append(TabDate.model_validate(raw))
        except ValidationError as exc:
            reason = _first_error(exc)
            logger.debug(
                "event=date_record_dropped position=%d error=%s",
                position,
                reason,
            )
            rejected.append(reason)

    if rejected and not records:
        detail = f"all {len(rejected)} records invalid: {rejected[0]}"
        return DecodeError(
            DecodeErrorKind.MALFORMED, detail[:ERROR_TRUNCATION_CHARS]
        )
    if rejected:
        logger.warning(
            "event=date_records_dropped dropped=%d kept=%d",
            len(rejected),
            len(records),
        )
    return DecodeOk(records=records, dropped=len(rejected))


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"]) or "record"
    return f"{loc}: {err['msg']}"
