"""Arrival time estimation per transfer speed

All calendar decisions are made in a fixed UTC-5 frame. Daylight saving time
is not modelled: EST applies year-round.
"""

from datetime import date, datetime, time, timedelta, timezone
from transfer_router.domain.exceptions import UnknownTransferSpeedError
from transfer_router.domain.models import TransferSpeed
from transfer_router.utils.date_utils import (
    add_business_days,
    ensure_aware,
    get_next_business_day,
    is_business_day,
)

EST = timezone(timedelta(hours=-5), "EST")

# ACH cutoff and settlement time, 5pm EST
CUTOFF_HOUR_EST = 17

INSTANT_DELAY = timedelta(minutes=5)

MONDAY = 0
THURSDAY = 3


def _to_est(moment: datetime) -> datetime:
    return ensure_aware(moment).astimezone(EST)


def _end_of_business_day(day: date) -> datetime:
    """5pm EST on the given EST calendar date"""
    return datetime.combine(day, time(hour=CUTOFF_HOUR_EST), tzinfo=EST)


def _in_frame_of(arrival: datetime, initiation: datetime) -> datetime:
    """Express an arrival in the same timezone as the initiation instant"""
    return arrival.astimezone(ensure_aware(initiation).tzinfo)


def is_before_cutoff(moment: datetime) -> bool:
    """True on an EST business day before 5pm EST"""
    est = _to_est(moment)
    return is_business_day(est) and est.hour < CUTOFF_HOUR_EST


def estimate_instant_arrival(initiation_time: datetime) -> datetime:
    """Instant transfers settle in five minutes, weekends included"""
    return ensure_aware(initiation_time) + INSTANT_DELAY


def estimate_same_day_arrival(initiation_time: datetime) -> datetime:
    """
    Before the cutoff on a business day: end of that business day.
    Otherwise: end of the next business day.
    """
    est = _to_est(initiation_time)
    if is_before_cutoff(initiation_time):
        arrival_day = est.date()
    else:
        arrival_day = get_next_business_day(est.date())
    return _in_frame_of(_end_of_business_day(arrival_day), initiation_time)


def estimate_one_day_arrival(initiation_time: datetime) -> datetime:
    """
    Mon-Thu before the cutoff: end of the next business day.
    Fri-Sun, or Thursday after the cutoff: end of the following Tuesday.
    """
    est = _to_est(initiation_time)
    weekday = est.weekday()
    weekend_rollover = weekday >= 4 or (weekday == THURSDAY and not is_before_cutoff(initiation_time))

    if weekend_rollover:
        day = est.date()
        while day.weekday() != MONDAY:
            day += timedelta(days=1)
        arrival_day = day + timedelta(days=1)
    else:
        arrival_day = get_next_business_day(est.date())

    return _in_frame_of(_end_of_business_day(arrival_day), initiation_time)


def estimate_three_day_arrival(initiation_time: datetime) -> datetime:
    """End of the third business day after the EST initiation date"""
    arrival_day = add_business_days(_to_est(initiation_time).date(), 3)
    return _in_frame_of(_end_of_business_day(arrival_day), initiation_time)


_ESTIMATORS = {
    TransferSpeed.INSTANT: estimate_instant_arrival,
    TransferSpeed.SAME_DAY: estimate_same_day_arrival,
    TransferSpeed.ONE_DAY: estimate_one_day_arrival,
    TransferSpeed.THREE_DAY: estimate_three_day_arrival,
}


def estimate_arrival_time(transfer_speed: TransferSpeed, initiation_time: datetime) -> datetime:
    """Dispatch to the estimator for `transfer_speed`"""
    try:
        estimator = _ESTIMATORS[TransferSpeed(transfer_speed)]
    except (KeyError, ValueError) as e:
        raise UnknownTransferSpeedError(f"Unknown transfer speed: {transfer_speed}") from e
    return estimator(initiation_time)
