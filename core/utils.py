from __future__ import annotations

import math
from datetime import datetime, timezone


def iso_now() -> str:
    # Use UTC ISO timestamps for consistency.
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round2(value: float) -> float:
    # Half-up on the 100x-scaled value (2.675 -> 2.68 where float allows).
    return math.floor(float(value) * 100 + 0.5) / 100

