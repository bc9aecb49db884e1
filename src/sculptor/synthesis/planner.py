"""
Program Assembler

Builds a complete 12-period program: periodization skeleton, exercise
selection, 80/20 set allocation, rationale text, and session duration.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from ..biomechanics import AnatomicalProfile, Morphotype
from ..config import SynthesisConfig
from ..graph import CatalogSnapshot
from ..models import (
    UPPER_BODY_MUSCLES,
    Day,
    EquipmentContext,
    ExerciseCatalogEntry,
    GoalArchetype,
    Period,
    PeriodType,
    PrescribedExercise,
    TrainingFrequency,
    TrainingProgram,
)
from .periodization import DayPlan, PeriodizationPlanner, next_monday
from .selection import LONG_ARM_TYPES, ExerciseSelector, MorphoContext

logger = logging.getLogger(__name__)

MIN_SETS_PER_EXERCISE = 2


def allocate_session_sets(
    weekly_sets: int,
    days_per_week: int,
    volume_modifier: float,
    priority_ratio: float
) -> Tuple[int, int, int]:
    """
    Split one session's working sets between priority and maintenance.

    Args:
        weekly_sets: Total weekly sets for the frequency
        days_per_week: Training days per week
        volume_modifier: Period volume modifier
        priority_ratio: Priority share (0.80)

    Returns:
        (session_sets, priority_sets, maintenance_sets)
    """
    session_sets = int(weekly_sets / days_per_week * volume_modifier)
    priority_sets = int(session_sets * priority_ratio)
    return session_sets, priority_sets, session_sets - priority_sets


def estimate_session_duration(
    exercises: Sequence[PrescribedExercise],
    config: Optional[SynthesisConfig] = None
) -> int:
    """Warm-up plus per-exercise set and rest time, capped at the session limit."""
    config = config or SynthesisConfig()
    total = config.warmup_minutes
    for ex in exercises:
        total += (ex.target_sets * (config.set_seconds + ex.rest_seconds)) // 60
    return min(total, config.max_session_minutes)


def _is_upper_body(exercise: ExerciseCatalogEntry) -> bool:
    muscle = (exercise.primary_muscle or "").lower()
    return any(m in muscle for m in UPPER_BODY_MUSCLES)


def distribute_for_day(
    training_slot: int,
    exercises: Sequence[ExerciseCatalogEntry],
    frequency: TrainingFrequency
) -> List[ExerciseCatalogEntry]:
    """
    Pick the subset of a group's exercises trained on one day.

    Args:
        training_slot: Position of the day among the week's training days
        exercises: Full priority or maintenance exercise list
        frequency: Training frequency

    Returns:
        Exercises for the day
    """
    if not exercises:
        return []

    if frequency is TrainingFrequency.FULL_BODY_3:
        per_day = max(1, len(exercises) // 3)
        start = training_slot * per_day
        if start >= len(exercises):
            return [exercises[0]]
        end = min(start + per_day + 1, len(exercises))
        return list(exercises[start:end])

    # Upper/lower: even slots are upper days
    is_upper_day = training_slot % 2 == 0
    filtered = [e for e in exercises if _is_upper_body(e) == is_upper_day]
    return filtered or [exercises[0]]


class ProgramAssembler:
    """
    Generates complete training programs.

    Integrates:
    - Periodization (period types and modifiers)
    - Exercise selection (exclusions, equipment, brands, anatomy)
    - 80/20 volume allocation
    - Rationale ("why") text for every prescription
    """

    def __init__(self, catalog: CatalogSnapshot, config: Optional[SynthesisConfig] = None):
        """
        Initialize assembler.

        Args:
            catalog: Catalog snapshot captured at call start
            config: Volume configuration (defaults if None)
        """
        self.catalog = catalog
        self.config = config or SynthesisConfig()
        self.selector = ExerciseSelector(catalog)

    def generate_program(
        self,
        goal,
        frequency,
        equipment: EquipmentContext,
        sex: str = "male",
        morphotype=None,
        profile: Optional[AnatomicalProfile] = None,
        today: Optional[date] = None
    ) -> TrainingProgram:
        """
        Generate a full 12-period program.

        Args:
            goal: GoalArchetype or its string value
            frequency: TrainingFrequency or its string value
            equipment: Available equipment and brands
            sex: Biological sex string
            morphotype: Optional Morphotype (or string)
            profile: Optional AnatomicalProfile
            today: Reference date (default: today)

        Returns:
            Fully assembled TrainingProgram
        """
        goal = GoalArchetype.parse(goal)
        frequency = TrainingFrequency.parse(frequency)
        morphotype = Morphotype.parse(morphotype)
        if morphotype is None and profile is not None:
            morphotype = profile.morphotype

        morpho = MorphoContext(goal=goal, sex=sex or "male", morphotype=morphotype, profile=profile)

        priority_exercises = self.selector.select_exercises(
            goal.priority_muscles, True, equipment, morpho
        )
        maintenance_exercises = self.selector.select_exercises(
            goal.maintenance_muscles, False, equipment, morpho
        )
        if not priority_exercises and not maintenance_exercises:
            logger.warning("Catalog yielded no usable exercises; program will contain rest only")

        start_date = next_monday(today or date.today())
        planner = PeriodizationPlanner(frequency)

        periods = []
        for plan in planner.build_skeleton(start_date):
            days = tuple(
                self._build_day(
                    day_plan,
                    plan.skeleton.period_type,
                    plan.skeleton.volume_modifier,
                    frequency,
                    priority_exercises,
                    maintenance_exercises,
                    morpho,
                )
                for day_plan in plan.days
            )
            periods.append(Period(
                number=plan.number,
                period_type=plan.skeleton.period_type,
                volume_modifier=plan.skeleton.volume_modifier,
                intensity_modifier=plan.skeleton.intensity_modifier,
                start_date=plan.start_date,
                days=days,
            ))

        program = TrainingProgram(
            name=f"{goal.display_name} - {frequency.display_name}",
            goal=goal,
            frequency=frequency,
            start_date=start_date,
            end_date=start_date + timedelta(weeks=12),
            morphotype_at_creation=morphotype.value if morphotype else None,
            periods=tuple(periods),
        )

        logger.info(
            f"Generated {program.name}: {len(priority_exercises)} priority, "
            f"{len(maintenance_exercises)} maintenance exercises, starting {start_date}"
        )
        return program

    def _build_day(
        self,
        day_plan: DayPlan,
        period_type: PeriodType,
        volume_modifier: float,
        frequency: TrainingFrequency,
        priority_exercises: List[ExerciseCatalogEntry],
        maintenance_exercises: List[ExerciseCatalogEntry],
        morpho: MorphoContext
    ) -> Day:
        if not day_plan.is_training:
            return Day(
                index=day_plan.index,
                label=day_plan.label,
                scheduled_date=day_plan.scheduled_date,
                is_rest_day=True,
            )

        exercises = self.allocate_day(
            day_plan.training_slot,
            period_type,
            volume_modifier,
            frequency,
            priority_exercises,
            maintenance_exercises,
            morpho,
        )
        # No usable catalog data at all: the training slot degrades to rest
        return Day(
            index=day_plan.index,
            label=day_plan.label,
            scheduled_date=day_plan.scheduled_date,
            is_rest_day=not exercises,
            exercises=tuple(exercises),
            estimated_duration_minutes=estimate_session_duration(exercises, self.config),
        )

    def allocate_day(
        self,
        training_slot: int,
        period_type: PeriodType,
        volume_modifier: float,
        frequency: TrainingFrequency,
        priority_exercises: List[ExerciseCatalogEntry],
        maintenance_exercises: List[ExerciseCatalogEntry],
        morpho: MorphoContext
    ) -> List[PrescribedExercise]:
        """
        Prescribe a training day's exercises under the priority/maintenance split.

        Returns:
            Ordered PrescribedExercise list (priority first)
        """
        _, priority_sets, maintenance_sets = allocate_session_sets(
            self.config.weekly_sets_for(frequency.value),
            frequency.days_per_week,
            volume_modifier,
            self.config.priority_ratio,
        )

        result = []
        groups = (
            (priority_exercises, priority_sets, True),
            (maintenance_exercises, maintenance_sets, False),
        )
        for exercises, group_sets, is_priority in groups:
            day_exercises = distribute_for_day(training_slot, exercises, frequency)
            if not day_exercises:
                continue

            sets_each = max(MIN_SETS_PER_EXERCISE, group_sets // len(day_exercises))
            for exercise in day_exercises:
                result.append(self._prescribe(
                    exercise, len(result), sets_each, period_type, is_priority, morpho
                ))

        return result

    def _prescribe(
        self,
        exercise: ExerciseCatalogEntry,
        order: int,
        sets: int,
        period_type: PeriodType,
        is_priority: bool,
        morpho: MorphoContext
    ) -> PrescribedExercise:
        if period_type is PeriodType.DELOAD:
            rpe = 5.0
        elif period_type is PeriodType.RAMP:
            rpe = 6.5
        else:
            rpe = 7.5

        return PrescribedExercise(
            exercise=exercise,
            order=order,
            target_sets=sets,
            target_reps="8-12" if is_priority else "10-15",
            target_rpe=rpe,
            rest_seconds=120 if is_priority else 90,
            tempo="4-1-2" if period_type is PeriodType.DELOAD else "3-1-2",
            is_priority=is_priority,
            why=generate_why_message(exercise, is_priority, period_type, morpho),
            priority_reason=priority_reason(exercise, morpho.goal) if is_priority else None,
        )


# =============================================================================
# RATIONALE
# =============================================================================

def anatomical_explanation(exercise: ExerciseCatalogEntry, morpho: MorphoContext) -> str:
    """Why this exercise suits the user's proportions ("" when nothing applies)."""
    if not morpho.can_substitute:
        return ""

    name = exercise.name.lower()
    morphotype = morpho.morphotype
    profile = morpho.profile

    if morphotype in LONG_ARM_TYPES and "dumbbell" in name and "bench" in name:
        return ("Dumbbells chosen because your long arms get better chest stretch "
                "and safer range of motion than a barbell.")

    if profile.femur_to_torso > 0.85:
        if "leg press" in name:
            return "Leg press selected because your long femurs make deep squats risky for your lower back."
        if "bulgarian" in name or "split squat" in name:
            return ("Bulgarian split squat chosen: your long femurs benefit from the "
                    "unilateral stance and reduced spinal load.")

    if morphotype is Morphotype.SHORT_TORSO and "hip thrust" in name:
        return "Hip thrust prioritized: your short torso makes heavy squats less efficient for glute activation."

    if exercise.equipment_type == "machine":
        return "Machine selected for its guided force curve, ideal for controlled hypertrophy."

    if profile.shoulder_to_hip > 1.4 and "incline" in name:
        return "Incline chosen because your wide clavicles benefit from upper chest focus to enhance the V-taper."

    if 0 < profile.shoulder_to_hip < 1.3 and "lateral" in name:
        return "Lateral raises prioritized to widen your delts and improve your shoulder-to-hip ratio."

    return ""


def generate_why_message(
    exercise: ExerciseCatalogEntry,
    is_priority: bool,
    period_type: PeriodType,
    morpho: MorphoContext
) -> str:
    """Anatomical note (if any) followed by a phase-specific purpose sentence."""
    muscle = exercise.primary_muscle or "this muscle"

    if not is_priority:
        phase_message = f"Maintenance volume for {muscle}: preserving balance with minimal sets (20%)."
    elif period_type is PeriodType.RAMP:
        phase_message = f"{muscle} is a priority. Ramp-up phase: learning the movement at lighter loads."
    elif period_type is PeriodType.OVERLOAD:
        phase_message = f"Overload phase: pushing {muscle} beyond normal capacity for adaptation."
    elif period_type is PeriodType.DELOAD:
        phase_message = f"Recovery week: light work to maintain {muscle} without accumulating fatigue."
    else:
        phase_message = f"{muscle} gets 80% volume priority for maximum growth stimulus."

    note = anatomical_explanation(exercise, morpho)
    return f"{note} {phase_message}" if note else phase_message


def priority_reason(exercise: ExerciseCatalogEntry, goal: GoalArchetype) -> str:
    muscle = (exercise.primary_muscle or "").lower()

    if goal is GoalArchetype.GREEK_MALE:
        if "delt" in muscle:
            return "V-taper: wide shoulders are the #1 Pareto lever."
        if "chest" in muscle:
            return "Upper chest creates the armored plate look."
        if "lat" in muscle:
            return "Lats widen your back for the V-taper silhouette."
        return "Priority muscle for the Greek Statue aesthetic."

    if "glute" in muscle:
        return "Glutes are the #1 driver of the hourglass shape."
    if "hamstring" in muscle:
        return "Hamstrings define the posterior curve."
    if "quad" in muscle:
        return "Quads create leg definition and balance."
    return "Priority muscle for the Hourglass aesthetic."


# =============================================================================
# TEXT OUTPUT
# =============================================================================

def format_program_text(program: TrainingProgram, periods: Optional[Sequence[int]] = None) -> str:
    """
    Format a program as readable text.

    Args:
        program: Assembled TrainingProgram
        periods: Period numbers to include (default: all)

    Returns:
        Formatted text string
    """
    lines = []

    lines.append("=" * 60)
    lines.append(program.name)
    lines.append("=" * 60)
    lines.append(f"\nStart: {program.start_date}  End: {program.end_date}")
    if program.morphotype_at_creation:
        lines.append(f"Morphotype: {program.morphotype_at_creation}")

    for period in program.periods:
        if periods and period.number not in periods:
            continue

        lines.append(f"\n{'─' * 60}")
        lines.append(
            f"PERIOD {period.number}: {period.period_type.display_name} "
            f"(volume {int(period.volume_modifier * 100)}%, "
            f"intensity {int(period.intensity_modifier * 100)}%)"
        )
        lines.append('─' * 60)

        for day in period.days:
            if day.is_rest_day:
                lines.append(f"\n{day.scheduled_date} {day.label}")
                continue

            lines.append(f"\n{day.scheduled_date} {day.label} (~{day.estimated_duration_minutes} min)")
            for i, ex in enumerate(day.exercises, 1):
                marker = "*" if ex.is_priority else " "
                lines.append(
                    f"  {i}.{marker} {ex.exercise.name}: {ex.target_sets} x {ex.target_reps} "
                    f"@ RPE {ex.target_rpe:g}, rest {ex.rest_seconds}s, tempo {ex.tempo}"
                )
                lines.append(f"      Why: {ex.why}")
                if ex.priority_reason:
                    lines.append(f"      Priority: {ex.priority_reason}")

    lines.append(f"\n{'=' * 60}")
    return '\n'.join(lines)
