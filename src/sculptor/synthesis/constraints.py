"""
Safety Constraints

Pure decision rules for anatomical bans, cycle-phase caps, and the
velocity-loss kill switch. Shared by the exercise selector and by
session-time callers.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Union

from ..biomechanics import AnatomicalProfile
from ..models import CyclePhase, PrescribedExercise

logger = logging.getLogger(__name__)

FATIGUE_VELOCITY_LOSS_LIMIT = 20.0
CYCLE_LENGTH_DAYS = 28


@dataclass(frozen=True)
class AnatomicalDecision:
    """An exercise banned for the user's proportions."""
    exercise_name: str
    is_banned: bool
    reason: str
    suggested_alternative: str


@dataclass(frozen=True)
class CycleConstraint:
    """Cycle-phase training caps."""
    phase: CyclePhase
    rpe_cap: float
    volume_reduction: float  # 0.20 = -20%
    reason: str


@dataclass(frozen=True)
class SessionBrief:
    """Pre-session summary combining readiness, cycle, and anatomy."""
    readiness_level: str
    cycle_note: Optional[str]
    recommended_focus: str
    warnings: List[str] = field(default_factory=list)


def _is_barbell_bench(name: str) -> bool:
    return "barbell bench" in name or ("bench press" in name and "dumbbell" not in name)


def evaluate_anatomical_constraint(
    profile: Optional[AnatomicalProfile],
    exercise_name: str
) -> Optional[AnatomicalDecision]:
    """
    Check whether an exercise is banned for the user's limb ratios.

    Rules are evaluated in order and the first match wins.

    Args:
        profile: AnatomicalProfile, or None
        exercise_name: Exercise name (matched case-insensitively by containment)

    Returns:
        AnatomicalDecision, or None if the exercise is safe
    """
    if profile is None:
        return None

    name = exercise_name.strip().lower()

    if profile.femur_to_torso > 0.85 and ("back squat" in name or name == "squat"):
        return AnatomicalDecision(
            exercise_name=exercise_name,
            is_banned=True,
            reason=(
                f"Your femur-to-torso ratio ({profile.femur_to_torso:.2f}) exceeds the "
                "safety threshold (0.85). Back squats place excessive shear on your lumbar spine."
            ),
            suggested_alternative="Leg Press or Bulgarian Split Squat",
        )

    if profile.humerus_to_torso > 0.52 and _is_barbell_bench(name):
        return AnatomicalDecision(
            exercise_name=exercise_name,
            is_banned=True,
            reason=(
                f"Your humerus-to-torso ratio ({profile.humerus_to_torso:.2f}) exceeds 0.52. "
                "Barbell bench press creates excessive shoulder stress with long arms."
            ),
            suggested_alternative="Dumbbell Bench Press",
        )

    if (profile.tibia_to_femur > 1.05 and "squat" in name
            and "box" not in name and "split" not in name):
        return AnatomicalDecision(
            exercise_name=exercise_name,
            is_banned=True,
            reason=(
                f"Your tibia-to-femur ratio ({profile.tibia_to_femur:.2f}) exceeds 1.05. "
                "Deep squats shift load forward onto your knees."
            ),
            suggested_alternative="Box Squat",
        )

    return None


def _parse_phase(phase: Union[CyclePhase, str, None]) -> Optional[CyclePhase]:
    if phase is None or isinstance(phase, CyclePhase):
        return phase
    return CyclePhase(str(phase).lower())


def evaluate_cycle_phase_constraint(
    phase: Union[CyclePhase, str, None]
) -> Optional[CycleConstraint]:
    """
    Training caps for the current menstrual-cycle phase.

    Args:
        phase: CyclePhase (or its string value), or None when untracked

    Returns:
        CycleConstraint for luteal/menstrual phases, otherwise None
    """
    phase = _parse_phase(phase)

    if phase is CyclePhase.LUTEAL:
        return CycleConstraint(
            phase=phase,
            rpe_cap=7.0,
            volume_reduction=0.20,
            reason="Luteal phase: RPE capped at 7, volume reduced 20% to match hormonal recovery capacity.",
        )
    if phase is CyclePhase.MENSTRUAL:
        return CycleConstraint(
            phase=phase,
            rpe_cap=8.0,
            volume_reduction=0.10,
            reason="Menstrual phase: RPE capped at 8, volume reduced 10% for comfort.",
        )
    return None


def phase_from_cycle_day(day: int) -> CyclePhase:
    """
    Map a 1-based cycle day to a phase on a 28-day model.

    Days beyond 28 wrap around.
    """
    if day < 1:
        raise ValueError(f"Cycle day must be >= 1, got {day}")

    normalized = ((day - 1) % CYCLE_LENGTH_DAYS) + 1
    if normalized <= 5:
        return CyclePhase.MENSTRUAL
    if normalized <= 13:
        return CyclePhase.FOLLICULAR
    if normalized <= 16:
        return CyclePhase.OVULATORY
    return CyclePhase.LUTEAL


def apply_cycle_constraint(
    exercises: Sequence[PrescribedExercise],
    constraint: Optional[CycleConstraint]
) -> List[PrescribedExercise]:
    """
    Return copies of a day's exercises with cycle caps applied.

    Args:
        exercises: Prescribed exercises from the program template
        constraint: CycleConstraint, or None

    Returns:
        New PrescribedExercise list (the template is not modified)
    """
    if constraint is None:
        return list(exercises)

    adjusted = []
    for ex in exercises:
        sets = max(2, int(ex.target_sets * (1.0 - constraint.volume_reduction)))
        adjusted.append(replace(
            ex,
            target_sets=sets,
            target_rpe=min(ex.target_rpe, constraint.rpe_cap),
        ))
    return adjusted


def evaluate_fatigue_kill_switch(velocity_loss_percent: float) -> bool:
    """
    True when velocity loss exceeds the safety threshold.

    The calling session must end the set: cut audio cues, fire a strong
    haptic alert, and log the set as autostopped.
    """
    triggered = velocity_loss_percent > FATIGUE_VELOCITY_LOSS_LIMIT
    if triggered:
        logger.info(f"Fatigue kill switch triggered at {velocity_loss_percent:.1f}% velocity loss")
    return triggered


def generate_brief(
    readiness: float,
    cycle_phase: Union[CyclePhase, str, None],
    profile: Optional[AnatomicalProfile],
    exercise_names: Iterable[str]
) -> SessionBrief:
    """
    Build a pre-session brief.

    Args:
        readiness: Readiness score 0-100
        cycle_phase: Current cycle phase, or None
        profile: AnatomicalProfile, or None
        exercise_names: Exercises planned for the session

    Returns:
        SessionBrief
    """
    if readiness >= 80:
        readiness_level = "Optimal: full intensity recommended"
    elif readiness >= 60:
        readiness_level = "Moderate: standard training with attention to recovery"
    elif readiness >= 35:
        readiness_level = "Low: reduced loads recommended"
    else:
        readiness_level = "Critical: volume mode activated, prioritize blood flow"

    constraint = evaluate_cycle_phase_constraint(cycle_phase)
    cycle_note = constraint.reason if constraint else None

    warnings = []
    if profile is not None:
        for name in exercise_names:
            decision = evaluate_anatomical_constraint(profile, name)
            if decision and decision.is_banned:
                warnings.append(f"{name} → {decision.suggested_alternative}")

    if readiness < 35:
        focus = "Light pump work: focus on mind-muscle connection"
    elif readiness < 60:
        focus = "Moderate intensity: prioritize technique over load"
    else:
        focus = "Push for progressive overload: conditions are favorable"

    return SessionBrief(
        readiness_level=readiness_level,
        cycle_note=cycle_note,
        recommended_focus=focus,
        warnings=warnings,
    )
