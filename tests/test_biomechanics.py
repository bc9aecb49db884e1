import unittest

from sculptor.biomechanics import (
    AnatomicalProfile,
    ExerciseRisk,
    Morphotype,
    assess_risk,
    suggest_alternatives,
    summarize_profile,
)

from fixtures import profile


class MorphotypeTests(unittest.TestCase):
    def test_parse_accepts_display_names(self):
        self.assertEqual(Morphotype.parse("Long-Limbed"), Morphotype.LONG_LIMBED)
        self.assertEqual(Morphotype.parse("short torso"), Morphotype.SHORT_TORSO)
        self.assertIsNone(Morphotype.parse(None))

    def test_parse_rejects_unknown(self):
        with self.assertRaises(ValueError):
            Morphotype.parse("ectomorph")

    def test_profile_from_dict(self):
        p = AnatomicalProfile.from_dict({"femur_to_torso": "0.91", "morphotype": "long_arms"})
        self.assertEqual(p.femur_to_torso, 0.91)
        self.assertEqual(p.humerus_to_torso, 0.0)
        self.assertEqual(p.morphotype, Morphotype.LONG_ARMS)


class RiskTests(unittest.TestCase):
    def test_back_squat_bands(self):
        self.assertEqual(assess_risk("Barbell Back Squat", profile(femur_to_torso=0.80)), ExerciseRisk.OPTIMAL)
        self.assertEqual(assess_risk("Barbell Back Squat", profile(femur_to_torso=0.95)), ExerciseRisk.CAUTION)
        self.assertEqual(assess_risk("Barbell Back Squat", profile(femur_to_torso=1.10)), ExerciseRisk.HIGH_RISK)

    def test_pressing_bands(self):
        self.assertEqual(assess_risk("Barbell Bench Press", profile(humerus_to_torso=0.85)), ExerciseRisk.CAUTION)
        self.assertEqual(assess_risk("overhead press", profile(humerus_to_torso=0.95)), ExerciseRisk.HIGH_RISK)

    def test_dips_are_never_optimal(self):
        self.assertEqual(assess_risk("Dips (Chest)", profile()), ExerciseRisk.CAUTION)

    def test_unknown_exercise_or_missing_profile_is_optimal(self):
        self.assertEqual(assess_risk("Cable Curl", profile(femur_to_torso=2.0)), ExerciseRisk.OPTIMAL)
        self.assertEqual(assess_risk("Barbell Back Squat", None), ExerciseRisk.OPTIMAL)

    def test_alternatives(self):
        self.assertEqual(suggest_alternatives("Pull-Up"), ["Lat Pulldown", "Seated Cable Row"])
        self.assertEqual(suggest_alternatives("Cable Curl"), [])


class SummaryTests(unittest.TestCase):
    def test_long_levers_summary(self):
        text = summarize_profile(profile(femur_to_torso=0.95, humerus_to_torso=0.85, shoulder_to_hip=1.45))
        self.assertIn("Longer femurs", text)
        self.assertIn("Longer arms", text)
        self.assertIn("V-taper", text)

    def test_empty_profile_is_balanced(self):
        self.assertEqual(
            summarize_profile(AnatomicalProfile()),
            "Your proportions are well-balanced across major movement patterns.",
        )


if __name__ == "__main__":
    unittest.main()
