"""Decoder for compact ``"weight x reps, weight x reps"`` set logs."""

import re
from typing import List, Tuple

from workoutcsv.models import SetEntry
from workoutcsv.records import leading_float

__all__ = ["decode_set_log"]

_SET_DELIMITER = re.compile("x", re.IGNORECASE)
EMPTY_LOGS = ("", "0")


def _decode_token(token: str) -> Tuple[float, int]:
    parts = _SET_DELIMITER.split(token, maxsplit=1)
    weight = leading_float(parts[0])
    reps = int(leading_float(parts[1])) if len(parts) > 1 else 0
    return weight, reps


def decode_set_log(text: str) -> Tuple[SetEntry, ...]:
    """Decode a set log string into set entries numbered from 1.

    Each comma-separated token is split on its first ``x`` (either case).
    Both sides are read as numbers, missing or unreadable sides count as 0
    and reps are truncated to an integer. Tokens where weight and reps are
    both 0 are not real attempts and are dropped; a token with either side
    positive is kept, which covers bodyweight and time-only entries.

    Args:
        text: Set log such as ``"20x10,70x5,90x5"``.

    Returns:
        Tuple of SetEntry in input order, numbered 1..N after dropping.
        ``"0"`` and ``""`` give an empty tuple.

    Example:
        >>> [(s.weight, s.reps) for s in decode_set_log("20x10, 0x0, 0X1200")]
        [(20.0, 10), (0.0, 1200)]
    """
    if text is None or text.strip() in EMPTY_LOGS:
        return ()

    decoded: List[Tuple[float, int]] = [_decode_token(token) for token in text.split(",")]
    kept = [(weight, reps) for weight, reps in decoded if weight > 0 or reps > 0]
    return tuple(
        SetEntry(set_number=number, weight=weight, reps=reps)
        for number, (weight, reps) in enumerate(kept, start=1)
    )
