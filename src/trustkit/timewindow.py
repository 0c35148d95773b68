"""Validity window parsing for entity claims.

Accepted forms for a bound:
- "0": no bound (valid from always / never expires)
- unix seconds, e.g. "1767225600"
- "YYYY-MM-DD" or an ISO-8601 datetime (UTC when no offset is given)
- "<n><unit>" relative to now: m(inutes), h(ours), d(ays), w(eeks), M(onths), y(ears)
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from trustkit.errors import TimeRangeError

_RELATIVE_RE = re.compile(r"^(\d+)([mhdwMy])$")
_FIXED_UNITS = {"m": "minutes", "h": "hours", "d": "days", "w": "weeks"}


def _add_months(moment: datetime, months: int) -> datetime:
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_time_spec(value: str, *, now: datetime | None = None) -> int:
    """Return unix seconds for `value`; 0 means the bound is unset."""
    spec = value.strip()
    if not spec:
        raise TimeRangeError("time value must not be empty")
    if spec.isdigit():
        return int(spec)

    match = _RELATIVE_RE.match(spec)
    if match:
        amount, unit = int(match.group(1)), match.group(2)
        base = now or datetime.now(timezone.utc)
        try:
            if unit in _FIXED_UNITS:
                moment = base + timedelta(**{_FIXED_UNITS[unit]: amount})
            elif unit == "M":
                moment = _add_months(base, amount)
            else:
                moment = _add_months(base, amount * 12)
        except (ValueError, OverflowError) as exc:
            raise TimeRangeError(f"time {value!r} is out of range") from exc
        return int(moment.timestamp())

    try:
        moment = datetime.fromisoformat(spec.replace("Z", "+00:00"))
    except ValueError as exc:
        raise TimeRangeError(
            f"invalid time {value!r}: expected 0, unix seconds, YYYY-MM-DD, "
            "an ISO-8601 datetime or #m/#h/#d/#w/#M/#y"
        ) from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


@dataclass
class TimeParams:
    """Start/expiry specs; `None` means the caller did not set the bound."""

    start: str | None = None
    expiry: str | None = None

    def is_start_changed(self) -> bool:
        return self.start is not None

    def is_expiry_changed(self) -> bool:
        return self.expiry is not None

    def start_date(self, *, now: datetime | None = None) -> int:
        if self.start is None:
            return 0
        return parse_time_spec(self.start, now=now)

    def expiry_date(self, *, now: datetime | None = None) -> int:
        if self.expiry is None:
            return 0
        return parse_time_spec(self.expiry, now=now)

    def validate(self) -> None:
        now = datetime.now(timezone.utc)
        start = self.start_date(now=now)
        expiry = self.expiry_date(now=now)
        if start > 0 and expiry > 0 and start > expiry:
            raise TimeRangeError(
                f"start ({self.start}) is after expiry ({self.expiry}) - "
                "the validity window would be empty"
            )

    def edit(self, text: Callable[..., str]) -> None:
        """Prompt for both bounds with `text(label, default=...)`."""
        self.start = text("valid from ('0' is always, '3d' is three days)", default=self.start or "0")
        self.expiry = text("valid until ('0' is always, '2M' is two months)", default=self.expiry or "0")
