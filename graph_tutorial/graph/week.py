"""
Tool: Week Window
Purpose: UTC instant at which the user's current calendar week begins

The calendar page queries Graph for the week containing "today" in the
user's mailbox time zone. Weeks start on Sunday. The start of the week is
local midnight, which is then converted to UTC with the zone's rules in
effect at that wall-clock moment (not the rules in effect now).

Nonexistent or repeated local midnights (DST transitions at 00:00) are
resolved deterministically:
    - gap ("spring forward"): the missing wall-clock time moves forward by
      the length of the gap and takes the post-transition offset, so a
      skipped 00:00 becomes 01:00 on the same Sunday
    - overlap ("fall back"): the standard-time offset applies; if neither
      candidate is standard time, the pre-transition offset applies

Usage:
    from datetime import date
    from graph_tutorial.graph.week import resolve_week_start_utc

    start = resolve_week_start_utc(date.today(), "Pacific Standard Time")
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo

from graph_tutorial.graph.timezones import UnknownTimeZone, get_zone


SUNDAY = 0
DAYS_IN_WEEK = 7


def day_of_week(d: date) -> int:
    """Day index with Sunday=0 ... Saturday=6."""
    return (d.weekday() + 1) % DAYS_IN_WEEK


def week_start_date(reference_date: date) -> date:
    """Most recent Sunday at or before the reference date."""
    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()
    diff = SUNDAY - day_of_week(reference_date)
    return reference_date + timedelta(days=diff)


def _exists(local: datetime) -> bool:
    """True if the aware wall-clock time survives a round trip through UTC."""
    round_trip = local.astimezone(timezone.utc).astimezone(local.tzinfo)
    return round_trip.replace(tzinfo=None, fold=0) == local.replace(tzinfo=None, fold=0)


def local_to_utc(wall_clock: datetime, zone: tzinfo) -> datetime:
    """
    Convert a naive wall-clock time in ``zone`` to an aware UTC datetime.

    Args:
        wall_clock: Naive datetime, interpreted as local time in ``zone``
        zone: Offset rules to apply

    Returns:
        Aware datetime in UTC
    """
    earlier = wall_clock.replace(tzinfo=zone, fold=0)
    later = wall_clock.replace(tzinfo=zone, fold=1)

    if earlier.utcoffset() != later.utcoffset() and _exists(earlier):
        # Overlap: standard time wins, else fold=0 (the pre-transition offset)
        standard = [c for c in (earlier, later) if not c.dst()]
        chosen = standard[0] if len(standard) == 1 else earlier
    else:
        # Unambiguous, or a gap: fold=0 applies the pre-transition offset,
        # which is the wall time shifted forward under the new offset
        chosen = earlier

    return chosen.astimezone(timezone.utc)


def resolve_week_start_utc(reference_date: date, time_zone: tzinfo | str) -> datetime:
    """
    Compute the UTC instant of local midnight on the Sunday starting the
    week that contains ``reference_date``.

    Args:
        reference_date: The day treated as "today". A datetime's time of
            day is ignored.
        time_zone: Resolved zone rules, or a zone identifier (IANA or
            Windows name)

    Returns:
        Aware datetime in UTC

    Raises:
        UnknownTimeZone: If ``time_zone`` is an identifier that cannot be
            resolved
    """
    if isinstance(time_zone, str):
        zone = get_zone(time_zone)
    elif time_zone is None:
        raise UnknownTimeZone(None)
    else:
        zone = time_zone

    start = week_start_date(reference_date)
    unspecified_start = datetime.combine(start, time.min)
    return local_to_utc(unspecified_start, zone)


def resolve_week_window_utc(
    reference_date: date, time_zone: tzinfo | str
) -> tuple[datetime, datetime]:
    """Return (start, end) in UTC for the week containing ``reference_date``.

    The end is the start of the following week, so a DST change within
    the week is reflected in its length.
    """
    start = resolve_week_start_utc(reference_date, time_zone)
    next_week = week_start_date(reference_date) + timedelta(days=DAYS_IN_WEEK)
    end = resolve_week_start_utc(next_week, time_zone)
    return start, end
