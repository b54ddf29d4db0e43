"""Date math for dashboard time expressions.

Understands the expressions dashboards use for time ranges and that
Cloudera Manager may echo back in timestamps:

- literal ISO-8601 instants: ``2015-10-02T12:58:24.009Z``
- relative to the current time: ``now``, ``now-1h``, ``now-7d/d``
- anchored to a date: ``2015-10-02T00:00:00Z||+1d/d``

Math is a sequence of ``+N<unit>``, ``-N<unit>`` and ``/<unit>`` (round to
the unit) operations, units being ``y M w d h m s``. All results are
timezone-aware UTC datetimes.
"""

import re
from datetime import datetime, timedelta, timezone

from dateutil import parser
from dateutil.relativedelta import relativedelta

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_OPERATION = re.compile(r"([/+-])(\d+)?([yMwdhms])")

_UNIT_ARGS = {
    "y": "years",
    "M": "months",
    "w": "weeks",
    "d": "days",
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
}


class DateMathError(ValueError):
    """Raised when a time expression cannot be parsed."""


def _as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _start_of(dt: datetime, unit: str) -> datetime:
    dt = dt.replace(microsecond=0)
    if unit == "s":
        return dt
    dt = dt.replace(second=0)
    if unit == "m":
        return dt
    dt = dt.replace(minute=0)
    if unit == "h":
        return dt
    dt = dt.replace(hour=0)
    if unit == "d":
        return dt
    if unit == "w":
        # Weeks start on Monday
        return dt - timedelta(days=dt.weekday())
    dt = dt.replace(day=1)
    if unit == "M":
        return dt
    return dt.replace(month=1)


def _end_of(dt: datetime, unit: str) -> datetime:
    start = _start_of(dt, unit)
    return start + relativedelta(**{_UNIT_ARGS[unit]: 1}) - timedelta(milliseconds=1)


def apply_math(math: str, time: datetime, round_up: bool = False) -> datetime:
    """Apply a date-math operation string to a datetime.

    Args:
        math: Operations such as ``-1h/d``.
        time: Anchor datetime.
        round_up: Round ``/unit`` operations to the end of the unit
            instead of its start.

    Returns:
        Resulting UTC datetime.

    Raises:
        DateMathError: If the operation string is malformed.
    """
    result = _as_utc(time)
    pos = 0
    while pos < len(math):
        match = _OPERATION.match(math, pos)
        if not match:
            raise DateMathError(f"Invalid date math at {pos}: {math!r}")
        op, amount, unit = match.groups()
        pos = match.end()

        if op == "/":
            if amount not in (None, "1"):
                raise DateMathError(f"Rounding takes no amount: {math!r}")
            result = _end_of(result, unit) if round_up else _start_of(result, unit)
            continue

        delta = relativedelta(**{_UNIT_ARGS[unit]: int(amount or 1)})
        result = result + delta if op == "+" else result - delta

    return result


def parse(
    text: str | datetime | int | float,
    *,
    round_up: bool = False,
    now: datetime | None = None,
) -> datetime:
    """Parse a literal or relative time expression.

    Args:
        text: Expression, datetime, or epoch milliseconds.
        round_up: Round ``/unit`` operations up (used for range ends).
        now: Reference time for ``now`` expressions; defaults to the
            current UTC time.

    Returns:
        Timezone-aware UTC datetime.

    Raises:
        DateMathError: If the expression is not understood.
    """
    if isinstance(text, datetime):
        return _as_utc(text)
    if isinstance(text, bool):
        raise DateMathError(f"Not a time expression: {text!r}")
    if isinstance(text, (int, float)):
        return EPOCH + timedelta(milliseconds=text)
    if not isinstance(text, str) or not text.strip():
        raise DateMathError(f"Not a time expression: {text!r}")

    text = text.strip()
    if text.startswith("now"):
        anchor = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        math = text[len("now"):]
    else:
        literal, sep, math = text.partition("||")
        try:
            anchor = _as_utc(parser.isoparse(literal))
        except (ValueError, OverflowError) as e:
            raise DateMathError(f"Invalid date {literal!r}: {e}") from e
        if sep and not math:
            raise DateMathError(f"Missing date math after '||': {text!r}")

    if not math:
        return anchor
    return apply_math(math, anchor, round_up=round_up)


def to_epoch_millis(dt: datetime) -> int:
    """Exact milliseconds since the Unix epoch; naive values are UTC."""
    return (_as_utc(dt) - EPOCH) // timedelta(milliseconds=1)


def to_iso8601(dt: datetime) -> str:
    """Format as UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    dt = _as_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
