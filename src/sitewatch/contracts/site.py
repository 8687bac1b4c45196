import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

# Latency recorded for a site whose last check failed. Orders after every real
# measurement and is never reported as a duration.
UNAVAILABLE_LATENCY = float("inf")

_NANOS_PER_UNIT = (
    ("s", 1_000_000_000),
    ("ms", 1_000_000),
    ("µs", 1_000),
)


def _with_fraction(nanos: int, unit: int) -> str:
    whole, remainder = divmod(nanos, unit)
    digits = len(str(unit)) - 1
    fraction = str(remainder).zfill(digits).rstrip("0")
    return f"{whole}.{fraction}" if fraction else str(whole)


def format_duration(seconds: float) -> str:
    """
    Render a latency in seconds the way Go prints a time.Duration
    (``850µs``, ``153.2ms``, ``1.5s``, ``2m3s``, ``1h0m5s``).

    Non-finite values render as ``unavailable``.
    """
    if not math.isfinite(seconds):
        return "unavailable"
    nanos = round(seconds * 1_000_000_000)
    if nanos == 0:
        return "0s"
    sign = "-" if nanos < 0 else ""
    nanos = abs(nanos)
    if nanos < 1_000:
        return f"{sign}{nanos}ns"
    if nanos < 60_000_000_000:
        for suffix, unit in _NANOS_PER_UNIT:
            if nanos >= unit:
                return f"{sign}{_with_fraction(nanos, unit)}{suffix}"
    hours, nanos = divmod(nanos, 3_600_000_000_000)
    minutes, nanos = divmod(nanos, 60_000_000_000)
    prefix = f"{hours}h{minutes}m" if hours else f"{minutes}m"
    return f"{sign}{prefix}{_with_fraction(nanos, 1_000_000_000)}s"


class SiteStatus(BaseModel):
    """
    Immutable snapshot of one monitored site.

    A new instance replaces the old one after every check, so ``available``
    and ``latency`` are always read as a consistent pair.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    available: bool = False
    latency: float = UNAVAILABLE_LATENCY
    last_checked_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_latency(self):
        if self.available:
            if not math.isfinite(self.latency) or self.latency < 0:
                raise ValueError(
                    "an available site needs a finite, non-negative latency"
                )
        elif self.latency != UNAVAILABLE_LATENCY:
            raise ValueError("an unavailable site must carry the sentinel latency")
        return self

    @classmethod
    def unavailable(cls, url: str, checked_at: Optional[datetime] = None):
        return cls(
            url=url,
            available=False,
            latency=UNAVAILABLE_LATENCY,
            last_checked_at=checked_at,
        )

    @property
    def has_latency(self) -> bool:
        return self.available and math.isfinite(self.latency)

    @property
    def display_latency(self) -> str:
        return format_duration(self.latency)

    def __repr__(self):
        return (
            f"SiteStatus(url={self.url}, available={self.available}, "
            f"latency={self.display_latency}, last_checked_at={self.last_checked_at})"
        )


class SiteReport(BaseModel):
    """
    JSON view of a site returned by the ``/sites`` route.
    """

    url: str
    available: bool
    latency_seconds: Optional[float] = None
    last_checked_at: Optional[datetime] = None

    @classmethod
    def from_status(cls, status: SiteStatus) -> "SiteReport":
        return cls(
            url=status.url,
            available=status.available,
            latency_seconds=status.latency if status.has_latency else None,
            last_checked_at=status.last_checked_at,
        )
