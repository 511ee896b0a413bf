"""
Business Day Module
===================

The shop closes its books at 21:00 local time (UTC+7), not at midnight.
Everything sold after 21:00 belongs to the next business day, and a
business day is named ("labelled") after the calendar date on which it
mostly trades.

The offset is a fixed business rule. It is applied as a constant
``timezone(timedelta(hours=7))`` and is never looked up in a
timezone database, so there is no daylight saving to account for.

Example:
    At 2026-02-05 08:00 local the business day started 2026-02-04 21:00
    and is labelled 2026-02-05. At 2026-02-05 22:00 it started
    2026-02-05 21:00 and is labelled 2026-02-06::

        clock = BusinessDayClock()
        start, end = clock.business_day_start(), clock.business_day_end()
        Transaction.objects.filter(created_at__gte=start, created_at__lt=end)
"""

from datetime import datetime, date, time, timedelta, timezone
from typing import Callable, Optional, Tuple

DAILY_CUTOFF_HOUR = 21
SHOP_UTC_OFFSET_HOURS = 7

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(instant: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


class BusinessDayClock:
    """
    Converts wall-clock time into the shop's 24-hour trading window.

    Args:
        cutoff_hour: Local hour at which a business day ends (0-23).
        utc_offset_hours: Fixed offset of the shop's local time.
        now: Callable returning the current instant; defaults to the
            system clock. Injected in tests.

    All boundaries are returned as aware UTC datetimes; the end of a
    window is exclusive.
    """

    def __init__(
        self,
        cutoff_hour: int = DAILY_CUTOFF_HOUR,
        utc_offset_hours: int = SHOP_UTC_OFFSET_HOURS,
        now: Optional[Callable[[], datetime]] = None,
    ):
        if not 0 <= cutoff_hour <= 23:
            raise ValueError("cutoff_hour must be between 0 and 23")

        self.cutoff_hour = cutoff_hour
        self.utc_offset_hours = utc_offset_hours
        self.tz = timezone(timedelta(hours=utc_offset_hours))
        self._now = now or _utc_now

    def to_local(self, instant: datetime) -> datetime:
        """``instant`` in shop local time."""
        return _as_utc(instant).astimezone(self.tz)

    def _cutoff_on(self, day: date) -> datetime:
        """The cutoff instant on a local calendar date, in UTC."""
        local = datetime.combine(day, time(hour=self.cutoff_hour), tzinfo=self.tz)
        return local.astimezone(timezone.utc)

    # Arbitrary instants

    def business_day_range_for(self, reference: datetime) -> Tuple[datetime, datetime]:
        """
        Return ``(start, end)`` of the business day containing ``reference``.

        A reference exactly at the cutoff belongs to the day that starts
        there.
        """
        local = self.to_local(reference)
        start_day = local.date()
        if local.hour < self.cutoff_hour:
            start_day -= timedelta(days=1)

        start = self._cutoff_on(start_day)
        return start, start + timedelta(hours=24)

    def business_day_label_for(self, instant: datetime) -> date:
        local = self.to_local(instant)
        if local.hour >= self.cutoff_hour:
            return local.date() + timedelta(days=1)
        return local.date()

    def business_day_range_for_label(self, label: date) -> Tuple[datetime, datetime]:
        """Window named by ``label``: from the previous day's cutoff to the label's cutoff."""
        end = self._cutoff_on(label)
        return end - timedelta(hours=24), end

    # Now

    def frozen(self) -> 'BusinessDayClock':
        """
        Copy of this clock stopped at the current instant.

        Label, window and countdown read from the copy all describe the
        same moment, even when a request straddles the cutoff.
        """
        instant = _as_utc(self._now())
        return BusinessDayClock(
            cutoff_hour=self.cutoff_hour,
            utc_offset_hours=self.utc_offset_hours,
            now=lambda: instant,
        )

    def current_local_time(self) -> datetime:
        return self.to_local(self._now())

    def business_day_start(self) -> datetime:
        return self.business_day_range_for(self._now())[0]

    def business_day_end(self) -> datetime:
        return self.business_day_start() + timedelta(hours=24)

    def business_day_label(self) -> date:
        return self.business_day_label_for(self._now())

    def milliseconds_until_reset(self) -> int:
        now = _as_utc(self._now())
        remaining = self.business_day_range_for(now)[1] - now
        return remaining // timedelta(milliseconds=1)

    def format_countdown(self) -> str:
        """
        Time left until the next cutoff, e.g. ``"3 jam 12 menit lagi"``.

        Hours and minutes are truncated, never rounded.
        """
        ms = self.milliseconds_until_reset()
        hours = ms // MS_PER_HOUR
        minutes = (ms % MS_PER_HOUR) // MS_PER_MINUTE

        if hours == 0:
            return f"{minutes} menit lagi"
        return f"{hours} jam {minutes} menit lagi"

    def is_within_current_business_day(self, instant: datetime) -> bool:
        start, end = self.business_day_range_for(self._now())
        return start <= _as_utc(instant) < end


def default_clock() -> BusinessDayClock:
    """Clock configured from Django settings."""
    from django.conf import settings

    return BusinessDayClock(
        cutoff_hour=getattr(settings, 'BUSINESS_DAY_CUTOFF_HOUR', DAILY_CUTOFF_HOUR),
        utc_offset_hours=getattr(settings, 'BUSINESS_DAY_UTC_OFFSET_HOURS', SHOP_UTC_OFFSET_HOURS),
    )
