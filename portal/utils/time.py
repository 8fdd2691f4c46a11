from datetime import date, datetime, timedelta, timezone
from typing import Optional

ONE_TICK = timedelta(microseconds=1)

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def to_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

def parse_iso(ts) -> Optional[datetime]:
    """
    Normalize a stored timestamp to an aware UTC datetime.
    Accepts datetime objects and ISO-8601 strings (supports trailing 'Z').
    Naive values are treated as UTC. Empty input returns None.
    """
    if ts is None:
        return None
    if isinstance(ts, datetime):
        dt = ts
    else:
        s = str(ts).strip()
        if not s:
            return None
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def next_stamp(now: datetime, previous: Optional[datetime]) -> datetime:
    """
    Timestamp for a mutation that must sort strictly after `previous`.
    Wall clocks can repeat a value (or step back) between two quick writes.
    """
    if previous is not None and now <= previous:
        return previous + ONE_TICK
    return now

def parse_birth_date(value: str) -> date:
    """Parse a YYYY-MM-DD date of birth; a full ISO timestamp is cut to its date part."""
    s = (value or "").strip()
    return date.fromisoformat(s.split("T")[0])

def age_on(birth: date, today: date) -> int:
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age
