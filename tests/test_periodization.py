import unittest
from datetime import date

from sculptor.models import PeriodType, TrainingFrequency
from sculptor.synthesis.periodization import (
    PeriodizationPlanner,
    build_period_skeleton,
    next_monday,
)


class PeriodSkeletonTests(unittest.TestCase):
    def test_period_types_follow_mesocycle(self):
        expected = (
            [PeriodType.RAMP] * 2
            + [PeriodType.NORMAL] * 6
            + [PeriodType.OVERLOAD] * 3
            + [PeriodType.DELOAD]
        )
        actual = [build_period_skeleton(n).period_type for n in range(1, 13)]
        self.assertEqual(actual, expected)

    def test_modifiers(self):
        ramp = build_period_skeleton(1)
        self.assertEqual((ramp.volume_modifier, ramp.intensity_modifier), (0.70, 0.85))
        overload = build_period_skeleton(10)
        self.assertEqual((overload.volume_modifier, overload.intensity_modifier), (1.10, 1.05))
        deload = build_period_skeleton(12)
        self.assertEqual((deload.volume_modifier, deload.intensity_modifier), (0.60, 0.70))

    def test_out_of_range_period_raises(self):
        for number in (0, 13, -1):
            with self.assertRaises(ValueError):
                build_period_skeleton(number)


class NextMondayTests(unittest.TestCase):
    def test_monday_moves_a_full_week(self):
        self.assertEqual(next_monday(date(2026, 10, 19)), date(2026, 10, 26))

    def test_midweek_and_sunday(self):
        self.assertEqual(next_monday(date(2026, 10, 21)), date(2026, 10, 26))
        self.assertEqual(next_monday(date(2026, 10, 25)), date(2026, 10, 26))


class PlannerTests(unittest.TestCase):
    def test_full_body_layout(self):
        periods = PeriodizationPlanner(TrainingFrequency.FULL_BODY_3).build_skeleton(date(2026, 10, 26))
        self.assertEqual(len(periods), 12)

        days = periods[0].days
        self.assertEqual(len(days), 7)
        self.assertEqual([d.index for d in days if d.is_training], [0, 2, 4])
        self.assertEqual([d.training_slot for d in days if d.is_training], [0, 1, 2])
        self.assertEqual(days[0].label, "Full Body A")
        self.assertEqual(days[6].scheduled_date, date(2026, 11, 1))

    def test_upper_lower_layout(self):
        periods = PeriodizationPlanner(TrainingFrequency.UPPER_LOWER_4).build_skeleton(date(2026, 10, 26))
        days = periods[0].days
        self.assertEqual([d.index for d in days if d.is_training], [0, 1, 3, 4])
        self.assertEqual([d.label for d in days if d.is_training], ["Upper A", "Lower A", "Upper B", "Lower B"])

    def test_periods_are_consecutive_weeks(self):
        periods = PeriodizationPlanner(TrainingFrequency.FULL_BODY_3).build_skeleton(date(2026, 10, 26))
        self.assertEqual(periods[1].start_date, date(2026, 11, 2))
        self.assertEqual(periods[11].start_date, date(2027, 1, 11))
        self.assertEqual([p.number for p in periods], list(range(1, 13)))


if __name__ == "__main__":
    unittest.main()
