"""
Periodization Logic Engine

Builds the 12-period mesocycle skeleton: period types, volume/intensity
modifiers, and the 7-day training/rest layout for a frequency.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from ..models import PeriodType, TrainingFrequency

PERIODS_PER_MESOCYCLE = 12
DAYS_PER_PERIOD = 7


@dataclass(frozen=True)
class PeriodSkeleton:
    period_type: PeriodType
    volume_modifier: float
    intensity_modifier: float


@dataclass(frozen=True)
class DayPlan:
    index: int
    label: str
    scheduled_date: date
    is_training: bool
    training_slot: Optional[int] = None  # position among the week's training days


@dataclass(frozen=True)
class PeriodPlan:
    number: int
    skeleton: PeriodSkeleton
    start_date: date
    days: List[DayPlan]


def build_period_skeleton(period_number: int) -> PeriodSkeleton:
    """
    Type and modifiers for a period.

    Periods 1-2 ramp, 3-8 normal, 9-11 overload, 12 deload.

    Args:
        period_number: 1-12

    Returns:
        PeriodSkeleton
    """
    period_type = PeriodType.for_period(period_number)
    return PeriodSkeleton(
        period_type=period_type,
        volume_modifier=period_type.volume_modifier,
        intensity_modifier=period_type.intensity_modifier,
    )


def next_monday(today: date) -> date:
    """The upcoming Monday; a week out when today is already Monday."""
    days_ahead = 7 - today.weekday()
    return today + timedelta(days=days_ahead)


class PeriodizationPlanner:
    """
    Lays out a mesocycle for one training frequency.

    Every period has 7 days regardless of how many are training days.
    """

    def __init__(self, frequency: TrainingFrequency):
        self.frequency = frequency

    def build_days(self, period_start: date) -> List[DayPlan]:
        training = self.frequency.training_day_indices
        labels = self.frequency.day_labels

        days = []
        for idx in range(DAYS_PER_PERIOD):
            is_training = idx in training
            days.append(DayPlan(
                index=idx,
                label=labels[idx],
                scheduled_date=period_start + timedelta(days=idx),
                is_training=is_training,
                training_slot=training.index(idx) if is_training else None,
            ))
        return days

    def build_skeleton(self, start_date: date) -> List[PeriodPlan]:
        """
        Build all 12 periods.

        Args:
            start_date: First day of period 1

        Returns:
            List of PeriodPlan in sequence order
        """
        periods = []
        for number in range(1, PERIODS_PER_MESOCYCLE + 1):
            period_start = start_date + timedelta(weeks=number - 1)
            periods.append(PeriodPlan(
                number=number,
                skeleton=build_period_skeleton(number),
                start_date=period_start,
                days=self.build_days(period_start),
            ))
        return periods
