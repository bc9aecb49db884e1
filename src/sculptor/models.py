"""
Program Data Model

Catalog reference data, user context, and the Program -> Period -> Day ->
PrescribedExercise tree produced by one synthesis call.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple


# =============================================================================
# CATALOG
# =============================================================================

@dataclass(frozen=True)
class MachineSpec:
    """Branded machine linked to a catalog exercise."""
    name: str
    brand: str
    resistance_profile: Optional[str] = None  # ascending, descending, linear


@dataclass(frozen=True)
class ExerciseCatalogEntry:
    """Immutable catalog exercise. Read-only to the engine."""
    id: str
    name: str
    primary_muscle: str
    category: Optional[str] = None
    secondary_muscles: Tuple[str, ...] = ()
    equipment_type: Optional[str] = None
    stretch_position_bonus: bool = False
    machine: Optional[MachineSpec] = None
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExerciseCatalogEntry':
        """Build an entry from a seed-file or graph record."""
        machine = data.get('machine')
        if isinstance(machine, dict) and machine.get('brand'):
            machine = MachineSpec(
                name=machine.get('name') or data['name'],
                brand=machine['brand'],
                resistance_profile=machine.get('resistance_profile'),
            )
        else:
            machine = None

        secondary = data.get('secondary_muscles') or ()
        if isinstance(secondary, str):
            secondary = [m.strip() for m in secondary.split(',') if m.strip()]

        equipment = data.get('equipment_type')
        return cls(
            id=str(data.get('id') or data['name'].lower().replace(' ', '_')),
            name=data['name'],
            primary_muscle=data['primary_muscle'],
            category=data.get('category'),
            secondary_muscles=tuple(secondary),
            equipment_type=equipment.lower() if equipment else None,
            stretch_position_bonus=bool(data.get('stretch_position_bonus', False)),
            machine=machine,
            tags=tuple(data.get('tags') or ()),
        )


# =============================================================================
# USER CONTEXT
# =============================================================================

HOME_EQUIPMENT = frozenset({"dumbbell", "band", "kettlebell", "bodyweight"})

# Waist-thickening movements never programmed for female users
FEMALE_BANNED_FRAGMENTS = ("oblique", "rotation", "woodchop", "side bend")

UPPER_BODY_MUSCLES = (
    "chest", "upper chest", "lats", "side delts", "rear delts",
    "traps", "biceps", "triceps", "upper back", "shoulders",
)


class GoalArchetype(Enum):
    """Target physique archetype determining priority muscle groups."""
    GREEK_MALE = "greek_male"
    HOURGLASS_FEMALE = "hourglass_female"

    @property
    def display_name(self) -> str:
        return {
            GoalArchetype.GREEK_MALE: "Greek Statue",
            GoalArchetype.HOURGLASS_FEMALE: "Hourglass",
        }[self]

    @property
    def priority_muscles(self) -> List[str]:
        """Muscles receiving ~80% of weekly volume."""
        if self is GoalArchetype.GREEK_MALE:
            return ["Side Delts", "Upper Chest", "Lats", "Rear Delts", "Traps"]
        return ["Glutes", "Hamstrings", "Quads", "Side Delts", "Upper Back"]

    @property
    def maintenance_muscles(self) -> List[str]:
        """Muscles receiving ~20% of weekly volume."""
        if self is GoalArchetype.GREEK_MALE:
            return ["Quads", "Hamstrings", "Glutes", "Biceps", "Triceps", "Chest"]
        return ["Chest", "Triceps", "Biceps", "Calves", "Core"]

    @property
    def banned_fragments(self) -> List[str]:
        """Exercise-name fragments never programmed for this goal."""
        banned = ["shrug", "forearm curl", "wrist curl", "neck curl"]
        if self is GoalArchetype.HOURGLASS_FEMALE:
            banned += ["russian twist", "cable woodchop", "oblique crunch"]
        return banned

    @classmethod
    def parse(cls, value) -> 'GoalArchetype':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown goal archetype: {value!r}") from None


class TrainingFrequency(Enum):
    """Weekly split template."""
    FULL_BODY_3 = "full_body_3"
    UPPER_LOWER_4 = "upper_lower_4"

    @property
    def days_per_week(self) -> int:
        return len(self.training_day_indices)

    @property
    def display_name(self) -> str:
        if self is TrainingFrequency.FULL_BODY_3:
            return "Full Body 3x"
        return "Upper / Lower 4x"

    @property
    def training_day_indices(self) -> List[int]:
        """Training day indices, 0 = Monday."""
        if self is TrainingFrequency.FULL_BODY_3:
            return [0, 2, 4]
        return [0, 1, 3, 4]

    @property
    def day_labels(self) -> List[str]:
        """Labels for all 7 days of the week."""
        if self is TrainingFrequency.FULL_BODY_3:
            return ["Full Body A", "Rest", "Full Body B", "Rest", "Full Body C", "Rest", "Rest"]
        return ["Upper A", "Lower A", "Rest", "Upper B", "Lower B", "Rest", "Rest"]

    @classmethod
    def parse(cls, value) -> 'TrainingFrequency':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown training frequency: {value!r}") from None


class CyclePhase(Enum):
    """Menstrual cycle phases."""
    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATORY = "ovulatory"
    LUTEAL = "luteal"


@dataclass(frozen=True)
class EquipmentContext:
    """Equipment and machine brands available at one facility."""
    equipment: FrozenSet[str] = frozenset()
    brands: Tuple[str, ...] = ()

    @classmethod
    def create(cls, equipment=None, brands=None) -> 'EquipmentContext':
        return cls(
            equipment=frozenset(e.strip().lower() for e in (equipment or []) if e.strip()),
            brands=tuple(b.strip() for b in (brands or []) if b.strip()),
        )

    def is_available(self, equipment_type: Optional[str]) -> bool:
        """Untyped exercises and unrestricted contexts always pass."""
        if equipment_type is None or not self.equipment:
            return True
        return equipment_type.lower() in self.equipment

    def has_brand(self, brand: Optional[str]) -> bool:
        if not brand:
            return False
        return any(b.lower() == brand.lower() for b in self.brands)

    @property
    def is_home_gym(self) -> bool:
        return bool(self.equipment) and self.equipment <= HOME_EQUIPMENT


# =============================================================================
# PROGRAM TREE
# =============================================================================

class PeriodType(Enum):
    """Periodization phase within the 12-period mesocycle."""
    RAMP = "ramp"
    NORMAL = "normal"
    OVERLOAD = "overload"
    DELOAD = "deload"

    @property
    def volume_modifier(self) -> float:
        return {
            PeriodType.RAMP: 0.70,
            PeriodType.NORMAL: 1.0,
            PeriodType.OVERLOAD: 1.10,
            PeriodType.DELOAD: 0.60,
        }[self]

    @property
    def intensity_modifier(self) -> float:
        return {
            PeriodType.RAMP: 0.85,
            PeriodType.NORMAL: 1.0,
            PeriodType.OVERLOAD: 1.05,
            PeriodType.DELOAD: 0.70,
        }[self]

    @property
    def display_name(self) -> str:
        return {
            PeriodType.RAMP: "Ramp-Up",
            PeriodType.NORMAL: "Normal",
            PeriodType.OVERLOAD: "Overload",
            PeriodType.DELOAD: "Deload",
        }[self]

    @classmethod
    def for_period(cls, number: int) -> 'PeriodType':
        """Period type for a 1-indexed period number."""
        if number in (1, 2):
            return cls.RAMP
        if 3 <= number <= 8:
            return cls.NORMAL
        if 9 <= number <= 11:
            return cls.OVERLOAD
        if number == 12:
            return cls.DELOAD
        raise ValueError(f"Period number must be 1-12, got {number}")


@dataclass(frozen=True)
class PrescribedExercise:
    """One exercise slot on a training day."""
    exercise: ExerciseCatalogEntry
    order: int
    target_sets: int
    target_reps: str
    target_rpe: float
    rest_seconds: int
    tempo: str
    is_priority: bool
    why: str
    priority_reason: Optional[str] = None
    completed_sets: int = 0
    is_completed: bool = False


@dataclass(frozen=True)
class Day:
    index: int
    label: str
    scheduled_date: date
    is_rest_day: bool
    exercises: Tuple[PrescribedExercise, ...] = ()
    estimated_duration_minutes: int = 0


@dataclass(frozen=True)
class Period:
    number: int
    period_type: PeriodType
    volume_modifier: float
    intensity_modifier: float
    start_date: date
    days: Tuple[Day, ...] = ()


@dataclass(frozen=True)
class TrainingProgram:
    """Root artifact of one synthesis call. Never mutated after assembly."""
    name: str
    goal: GoalArchetype
    frequency: TrainingFrequency
    start_date: date
    end_date: date
    morphotype_at_creation: Optional[str] = None
    periods: Tuple[Period, ...] = field(default_factory=tuple)

    def training_days(self):
        for period in self.periods:
            for day in period.days:
                if not day.is_rest_day:
                    yield period, day

    def record_completion(
        self,
        period_number: int,
        day_index: int,
        order: int,
        completed_sets: int
    ) -> 'TrainingProgram':
        """
        Return a copy with completion fields set on one prescribed exercise.

        The template program is left untouched.
        """
        periods = list(self.periods)
        for p_idx, period in enumerate(periods):
            if period.number != period_number:
                continue
            days = list(period.days)
            if not 0 <= day_index < len(days):
                raise ValueError(f"Day index must be 0-{len(days) - 1}, got {day_index}")
            day = days[day_index]
            exercises = list(day.exercises)
            for e_idx, ex in enumerate(exercises):
                if ex.order == order:
                    exercises[e_idx] = replace(
                        ex,
                        completed_sets=completed_sets,
                        is_completed=completed_sets >= ex.target_sets,
                    )
                    break
            else:
                raise ValueError(f"No exercise with order {order} on day {day_index}")
            days[day_index] = replace(day, exercises=tuple(exercises))
            periods[p_idx] = replace(period, days=tuple(days))
            return replace(self, periods=tuple(periods))

        raise ValueError(f"No period number {period_number}")


def program_to_dict(program: TrainingProgram) -> Dict:
    """Serialize a program tree to plain dictionaries."""
    return {
        "name": program.name,
        "goal": program.goal.value,
        "frequency": program.frequency.value,
        "morphotype_at_creation": program.morphotype_at_creation,
        "start_date": program.start_date.isoformat(),
        "end_date": program.end_date.isoformat(),
        "periods": [
            {
                "number": period.number,
                "type": period.period_type.value,
                "volume_modifier": period.volume_modifier,
                "intensity_modifier": period.intensity_modifier,
                "start_date": period.start_date.isoformat(),
                "days": [
                    {
                        "index": day.index,
                        "label": day.label,
                        "date": day.scheduled_date.isoformat(),
                        "is_rest_day": day.is_rest_day,
                        "estimated_duration_minutes": day.estimated_duration_minutes,
                        "exercises": [
                            {
                                "exercise_id": ex.exercise.id,
                                "name": ex.exercise.name,
                                "order": ex.order,
                                "sets": ex.target_sets,
                                "reps": ex.target_reps,
                                "rpe": ex.target_rpe,
                                "rest_seconds": ex.rest_seconds,
                                "tempo": ex.tempo,
                                "is_priority": ex.is_priority,
                                "why": ex.why,
                                "priority_reason": ex.priority_reason,
                                "completed_sets": ex.completed_sets,
                                "is_completed": ex.is_completed,
                            }
                            for ex in day.exercises
                        ],
                    }
                    for day in period.days
                ],
            }
            for period in program.periods
        ],
    }
