import unittest

from sculptor.models import CyclePhase
from sculptor.synthesis.constraints import (
    apply_cycle_constraint,
    evaluate_anatomical_constraint,
    evaluate_cycle_phase_constraint,
    evaluate_fatigue_kill_switch,
    generate_brief,
    phase_from_cycle_day,
)

from fixtures import build_catalog, profile


class AnatomicalConstraintTests(unittest.TestCase):
    def test_long_femur_bans_back_squat(self):
        decision = evaluate_anatomical_constraint(profile(femur_to_torso=0.90), "Back Squat")
        self.assertIsNotNone(decision)
        self.assertTrue(decision.is_banned)
        self.assertEqual(decision.suggested_alternative, "Leg Press or Bulgarian Split Squat")
        self.assertIn("0.90", decision.reason)

    def test_normal_femur_allows_back_squat(self):
        self.assertIsNone(evaluate_anatomical_constraint(profile(femur_to_torso=0.60), "Back Squat"))

    def test_plain_squat_matches_only_exactly(self):
        long_femur = profile(femur_to_torso=0.90)
        self.assertIsNotNone(evaluate_anatomical_constraint(long_femur, "Squat"))
        self.assertIsNone(evaluate_anatomical_constraint(long_femur, "Goblet Squat"))

    def test_long_humerus_bans_barbell_bench_not_dumbbell(self):
        long_arms = profile(humerus_to_torso=0.60)
        decision = evaluate_anatomical_constraint(long_arms, "Barbell Bench Press")
        self.assertEqual(decision.suggested_alternative, "Dumbbell Bench Press")
        self.assertIsNone(evaluate_anatomical_constraint(long_arms, "Dumbbell Bench Press"))

    def test_long_tibia_bans_squat_except_box_and_split(self):
        long_tibia = profile(tibia_to_femur=1.10)
        decision = evaluate_anatomical_constraint(long_tibia, "Goblet Squat")
        self.assertEqual(decision.suggested_alternative, "Box Squat")
        self.assertIsNone(evaluate_anatomical_constraint(long_tibia, "Box Squat"))
        self.assertIsNone(evaluate_anatomical_constraint(long_tibia, "Bulgarian Split Squat"))

    def test_first_matching_rule_wins(self):
        both = profile(femur_to_torso=0.90, tibia_to_femur=1.10)
        decision = evaluate_anatomical_constraint(both, "Barbell Back Squat")
        self.assertEqual(decision.suggested_alternative, "Leg Press or Bulgarian Split Squat")

    def test_missing_profile_returns_none(self):
        self.assertIsNone(evaluate_anatomical_constraint(None, "Back Squat"))


class CyclePhaseTests(unittest.TestCase):
    def test_luteal_caps_rpe_and_volume(self):
        constraint = evaluate_cycle_phase_constraint(CyclePhase.LUTEAL)
        self.assertEqual(constraint.rpe_cap, 7.0)
        self.assertAlmostEqual(constraint.volume_reduction, 0.20)

    def test_menstrual_caps_rpe_and_volume(self):
        constraint = evaluate_cycle_phase_constraint("menstrual")
        self.assertEqual(constraint.rpe_cap, 8.0)
        self.assertAlmostEqual(constraint.volume_reduction, 0.10)

    def test_follicular_ovulatory_and_missing_have_no_constraint(self):
        self.assertIsNone(evaluate_cycle_phase_constraint(CyclePhase.FOLLICULAR))
        self.assertIsNone(evaluate_cycle_phase_constraint(CyclePhase.OVULATORY))
        self.assertIsNone(evaluate_cycle_phase_constraint(None))

    def test_phase_from_cycle_day(self):
        self.assertEqual(phase_from_cycle_day(1), CyclePhase.MENSTRUAL)
        self.assertEqual(phase_from_cycle_day(6), CyclePhase.FOLLICULAR)
        self.assertEqual(phase_from_cycle_day(15), CyclePhase.OVULATORY)
        self.assertEqual(phase_from_cycle_day(28), CyclePhase.LUTEAL)
        self.assertEqual(phase_from_cycle_day(29), CyclePhase.MENSTRUAL)
        with self.assertRaises(ValueError):
            phase_from_cycle_day(0)

    def test_apply_cycle_constraint_returns_adjusted_copies(self):
        from sculptor.models import PrescribedExercise

        exercise = build_catalog().get("pulldown")
        prescribed = PrescribedExercise(
            exercise=exercise, order=0, target_sets=4, target_reps="8-12",
            target_rpe=7.5, rest_seconds=120, tempo="3-1-2", is_priority=True, why="",
        )
        adjusted = apply_cycle_constraint([prescribed], evaluate_cycle_phase_constraint("luteal"))

        self.assertEqual(adjusted[0].target_rpe, 7.0)
        self.assertEqual(adjusted[0].target_sets, 3)
        self.assertEqual(prescribed.target_sets, 4)
        self.assertEqual(apply_cycle_constraint([prescribed], None), [prescribed])


class FatigueKillSwitchTests(unittest.TestCase):
    def test_threshold_is_strict(self):
        self.assertTrue(evaluate_fatigue_kill_switch(21.0))
        self.assertFalse(evaluate_fatigue_kill_switch(20.0))
        self.assertFalse(evaluate_fatigue_kill_switch(5.0))


class SessionBriefTests(unittest.TestCase):
    def test_readiness_bands(self):
        self.assertTrue(generate_brief(85, None, None, []).readiness_level.startswith("Optimal"))
        self.assertTrue(generate_brief(60, None, None, []).readiness_level.startswith("Moderate"))
        self.assertTrue(generate_brief(35, None, None, []).readiness_level.startswith("Low"))
        self.assertTrue(generate_brief(10, None, None, []).readiness_level.startswith("Critical"))

    def test_focus_bands(self):
        self.assertTrue(generate_brief(34, None, None, []).recommended_focus.startswith("Light pump"))
        self.assertTrue(generate_brief(59, None, None, []).recommended_focus.startswith("Moderate"))
        self.assertTrue(generate_brief(60, None, None, []).recommended_focus.startswith("Push"))

    def test_brief_collects_cycle_note_and_warnings(self):
        brief = generate_brief(
            70,
            CyclePhase.LUTEAL,
            profile(femur_to_torso=0.90),
            ["Back Squat", "Lat Pulldown"],
        )
        self.assertIn("Luteal", brief.cycle_note)
        self.assertEqual(brief.warnings, ["Back Squat → Leg Press or Bulgarian Split Squat"])

    def test_brief_without_profile_has_no_warnings(self):
        brief = generate_brief(70, None, None, ["Back Squat"])
        self.assertEqual(brief.warnings, [])
        self.assertIsNone(brief.cycle_note)


if __name__ == "__main__":
    unittest.main()
