"""
Biomechanical Data Model

Defines morphotypes, limb-ratio profiles, and ratio-based exercise risk rules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional


class Morphotype(Enum):
    """Coarse anatomical classification from the body scan."""
    LONG_LIMBED = "long_limbed"
    SHORT_TORSO = "short_torso"
    LONG_TORSO = "long_torso"
    PROPORTIONAL = "proportional"
    LONG_ARMS = "long_arms"
    SHORT_ARMS = "short_arms"

    @classmethod
    def parse(cls, value) -> Optional['Morphotype']:
        """Accept enum values, raw values, or display names ("Long-Limbed")."""
        if value is None or isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown morphotype: {value!r}") from None


class ExerciseRisk(Enum):
    """Risk classification from limb ratios and lever mechanics."""
    OPTIMAL = "optimal"
    CAUTION = "caution"
    HIGH_RISK = "high_risk"


@dataclass(frozen=True)
class AnatomicalProfile:
    """Limb-segment ratios produced by the body-scan subsystem."""
    femur_to_torso: float = 0.0
    humerus_to_torso: float = 0.0
    tibia_to_femur: float = 0.0
    shoulder_to_hip: float = 0.0
    arm_span_to_height: float = 0.0
    hip_width: float = 0.0
    morphotype: Optional[Morphotype] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'AnatomicalProfile':
        """
        Build a profile from a body-scan payload.

        Args:
            data: Mapping of ratio names to values, optional 'morphotype'

        Returns:
            AnatomicalProfile
        """
        return cls(
            femur_to_torso=float(data.get('femur_to_torso', 0.0)),
            humerus_to_torso=float(data.get('humerus_to_torso', 0.0)),
            tibia_to_femur=float(data.get('tibia_to_femur', 0.0)),
            shoulder_to_hip=float(data.get('shoulder_to_hip', 0.0)),
            arm_span_to_height=float(data.get('arm_span_to_height', 0.0)),
            hip_width=float(data.get('hip_width', 0.0)),
            morphotype=Morphotype.parse(data.get('morphotype')),
        )


# Per-exercise risk rules keyed by lower-cased catalog name
RISK_RULES: Dict[str, Callable[[AnatomicalProfile], ExerciseRisk]] = {
    # Lower body compounds
    "barbell back squat": lambda p: (
        ExerciseRisk.HIGH_RISK if p.femur_to_torso > 1.05
        else ExerciseRisk.CAUTION if p.femur_to_torso > 0.92
        else ExerciseRisk.OPTIMAL
    ),
    "barbell front squat": lambda p: (
        ExerciseRisk.CAUTION if p.femur_to_torso > 1.10 else ExerciseRisk.OPTIMAL
    ),
    "conventional deadlift": lambda p: (
        ExerciseRisk.HIGH_RISK if p.arm_span_to_height < 0.96 and p.femur_to_torso < 0.78
        else ExerciseRisk.CAUTION if p.arm_span_to_height < 1.0
        else ExerciseRisk.OPTIMAL
    ),
    "sumo deadlift": lambda p: (
        ExerciseRisk.CAUTION if p.hip_width < 25 and p.shoulder_to_hip > 1.50
        else ExerciseRisk.OPTIMAL
    ),
    "bulgarian split squat": lambda p: (
        ExerciseRisk.CAUTION if p.femur_to_torso > 1.05 else ExerciseRisk.OPTIMAL
    ),

    # Upper body pressing
    "barbell bench press": lambda p: _pressing_risk(p.humerus_to_torso),
    "incline barbell press": lambda p: _pressing_risk(p.humerus_to_torso),
    "overhead press": lambda p: _pressing_risk(p.humerus_to_torso),
    "dumbbell bench press": lambda p: (
        ExerciseRisk.CAUTION if p.humerus_to_torso > 0.92 else ExerciseRisk.OPTIMAL
    ),
    # Dips stress the shoulder regardless; long arms make it worse
    "dips (chest)": lambda p: (
        ExerciseRisk.HIGH_RISK if p.humerus_to_torso > 0.85 else ExerciseRisk.CAUTION
    ),

    # Upper body pulling
    "barbell row": lambda p: (
        ExerciseRisk.CAUTION if p.femur_to_torso > 1.0 else ExerciseRisk.OPTIMAL
    ),
    "t-bar row": lambda p: (
        ExerciseRisk.CAUTION if p.femur_to_torso > 1.0 else ExerciseRisk.OPTIMAL
    ),
    "pull-up": lambda p: (
        ExerciseRisk.CAUTION if p.arm_span_to_height < 0.97 else ExerciseRisk.OPTIMAL
    ),
}


ALTERNATIVE_MAP: Dict[str, List[str]] = {
    "barbell back squat": ["Barbell Front Squat", "Leg Press", "Bulgarian Split Squat"],
    "conventional deadlift": ["Sumo Deadlift", "Romanian Deadlift", "Hip Thrust"],
    "barbell bench press": ["Dumbbell Bench Press", "Cable Fly"],
    "incline barbell press": ["Dumbbell Bench Press", "Cable Fly"],
    "overhead press": ["Lateral Raise", "Cable Lateral Raise"],
    "dips (chest)": ["Cable Fly", "Dumbbell Bench Press"],
    "barbell row": ["Seated Cable Row", "Lat Pulldown"],
    "pull-up": ["Lat Pulldown", "Seated Cable Row"],
    "t-bar row": ["Seated Cable Row", "Lat Pulldown"],
}


def _pressing_risk(humerus_to_torso: float) -> ExerciseRisk:
    if humerus_to_torso > 0.90:
        return ExerciseRisk.HIGH_RISK
    if humerus_to_torso > 0.82:
        return ExerciseRisk.CAUTION
    return ExerciseRisk.OPTIMAL


def assess_risk(exercise_name: str, profile: Optional[AnatomicalProfile]) -> ExerciseRisk:
    """
    Evaluate injury risk for an exercise given the user's limb ratios.

    Args:
        exercise_name: Catalog exercise name
        profile: AnatomicalProfile, or None when no scan exists

    Returns:
        ExerciseRisk (OPTIMAL for unknown exercises or missing profile)
    """
    if profile is None:
        return ExerciseRisk.OPTIMAL

    rule = RISK_RULES.get(exercise_name.strip().lower())
    if rule is None:
        return ExerciseRisk.OPTIMAL
    return rule(profile)


def suggest_alternatives(exercise_name: str) -> List[str]:
    """Morphology-friendlier alternatives for an exercise, if any are mapped."""
    return list(ALTERNATIVE_MAP.get(exercise_name.strip().lower(), []))


def summarize_profile(profile: AnatomicalProfile) -> str:
    """
    Generate a natural-language summary of the user's leverages.

    Args:
        profile: AnatomicalProfile

    Returns:
        Summary sentences joined by spaces
    """
    insights = []

    # Pressing
    if 0 < profile.humerus_to_torso < 0.73:
        insights.append("Short levers give you a mechanical advantage on pressing movements.")
    elif profile.humerus_to_torso > 0.82:
        insights.append("Longer arms increase ROM on pressing movements. Focus on controlled eccentrics.")

    # Squatting
    if 0 < profile.femur_to_torso < 0.82:
        insights.append("Your proportions favour strong squat mechanics with an upright torso.")
    elif profile.femur_to_torso > 0.92:
        insights.append("Longer femurs may increase forward lean on squats. Consider heel elevation or front squat variants.")

    # Deadlifting
    if profile.arm_span_to_height > 1.03:
        insights.append("Long reach gives you excellent deadlift leverage with a shorter bar path off the floor.")
    elif 0 < profile.arm_span_to_height < 0.97:
        insights.append("Shorter reach increases deadlift difficulty off the floor. Sumo or trap bar may suit you better.")

    if profile.shoulder_to_hip > 1.40:
        insights.append("Wide clavicle structure provides a strong V-taper foundation.")

    if not insights:
        insights.append("Your proportions are well-balanced across major movement patterns.")

    return " ".join(insights)
