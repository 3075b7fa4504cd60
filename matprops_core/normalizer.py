"""Shape raw channel output into fixed-arity result vectors."""

from __future__ import annotations

from numbers import Real
from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np

from .errors import ArityMismatch, ChannelMalformedResponse
from .models import ComputationResult, Duration


def normalize(raw: Any, expected_arity: int) -> ComputationResult:
    """Return ``raw`` as a tuple of floats of length ``expected_arity``.

    Raises ``ArityMismatch`` when the length is wrong and
    ``ChannelMalformedResponse`` when ``raw`` is not a sequence of numbers.
    """

    if not _is_sequence(raw):
        raise ChannelMalformedResponse(f"expected a sequence of numbers, got {type(raw).__name__}.")
    if isinstance(raw, np.ndarray):
        raw = raw.tolist()
    if len(raw) != expected_arity:
        raise ArityMismatch(expected_arity, len(raw))
    return tuple(_as_float(item, index) for index, item in enumerate(raw))


def split_response(raw: Any) -> Tuple[Any, Optional[Duration]]:
    """Separate values from host-reported timing.

    The native host answers either with a bare value array or with a
    slot-shaped pair ``[values, {"secs": s, "nanos": n}]``; a mapping with
    ``value`` and ``timing`` keys is accepted as well.
    """

    if isinstance(raw, Mapping):
        if "value" not in raw:
            raise ChannelMalformedResponse("mapping response has no 'value' key.")
        return raw["value"], _timing_or_none(raw.get("timing"))

    if _is_sequence(raw) and len(raw) == 2 and _is_sequence(raw[0]) and isinstance(raw[1], Mapping):
        return raw[0], _timing_or_none(raw[1])

    return raw, None


def _timing_or_none(raw: Any) -> Optional[Duration]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ChannelMalformedResponse(f"timing must be a mapping, got {type(raw).__name__}.")
    try:
        return Duration.from_wire(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise ChannelMalformedResponse(f"invalid timing {dict(raw)!r}.") from exc


def _is_sequence(raw: Any) -> bool:
    if isinstance(raw, np.ndarray):
        return raw.ndim == 1
    return isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray))


def _as_float(item: Any, index: int) -> float:
    # bool is a Real; a flag in the value array is a contract violation
    if isinstance(item, bool) or not isinstance(item, Real):
        raise ChannelMalformedResponse(f"value #{index} is not a number: {item!r}.")
    return float(item)
