"""
Exercise Selection

Resolves concrete catalog exercises for target muscles through exclusion
rules, equipment filtering, machine-brand preference, and anatomical
substitution.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..biomechanics import AnatomicalProfile, Morphotype
from ..graph import CatalogSnapshot
from ..models import (
    FEMALE_BANNED_FRAGMENTS,
    EquipmentContext,
    ExerciseCatalogEntry,
    GoalArchetype,
)

logger = logging.getLogger(__name__)

LONG_ARM_TYPES = (Morphotype.LONG_ARMS, Morphotype.LONG_LIMBED)


@dataclass(frozen=True)
class MorphoContext:
    """User context threaded through selection and rationale generation."""
    goal: GoalArchetype
    sex: str = "male"
    morphotype: Optional[Morphotype] = None
    profile: Optional[AnatomicalProfile] = None

    @property
    def is_female(self) -> bool:
        return self.sex.strip().lower() == "female"

    @property
    def can_substitute(self) -> bool:
        return self.morphotype is not None and self.profile is not None


@dataclass(frozen=True)
class SubstitutionRule:
    """One row of the anatomical substitution table."""
    description: str
    target_muscle: Optional[str]  # None = reuse the original's primary muscle
    default_muscle: str
    preferred_equipment: Optional[Sequence[str]]  # None = the gym's equipment
    preferred_names: Sequence[str]


def _match_substitution(
    name: str,
    morphotype: Morphotype,
    profile: AnatomicalProfile
) -> Optional[SubstitutionRule]:
    """Return the first substitution rule triggered by an exercise name."""
    if morphotype in LONG_ARM_TYPES and (
            "barbell bench" in name or ("bench press" in name and "dumbbell" not in name)):
        return SubstitutionRule(
            "long arms: barbell bench to dumbbell bench",
            None, "Chest", ("dumbbell", "machine"),
            ("dumbbell bench", "db bench", "incline db"),
        )

    if morphotype in LONG_ARM_TYPES and (
            "military press" in name or "overhead press barbell" in name):
        return SubstitutionRule(
            "long arms: barbell overhead press to dumbbell/machine press",
            None, "Shoulders", ("dumbbell", "machine"),
            ("dumbbell shoulder", "db overhead", "shoulder press machine"),
        )

    if (morphotype is Morphotype.LONG_LIMBED or profile.femur_to_torso > 0.85) and (
            "back squat" in name or name == "squat"):
        return SubstitutionRule(
            "long femurs: back squat to leg press or split squat",
            None, "Quads", ("machine", "dumbbell"),
            ("leg press", "bulgarian", "split squat", "front squat"),
        )

    if morphotype is Morphotype.SHORT_TORSO and (
            "squat" in name and "front" not in name and "split" not in name):
        return SubstitutionRule(
            "short torso: squat to hip thrust or RDL",
            "Glutes", "Glutes", None,
            ("hip thrust", "rdl", "romanian"),
        )

    if morphotype is Morphotype.LONG_TORSO and (
            "deadlift" in name and "romanian" not in name and "rdl" not in name):
        return SubstitutionRule(
            "long torso: deadlift to trap bar or RDL",
            None, "Hamstrings", None,
            ("trap bar", "rdl", "romanian deadlift"),
        )

    if morphotype is Morphotype.SHORT_ARMS and "dip" in name:
        return SubstitutionRule(
            "short arms: dips to chest press",
            None, "Chest", ("machine", "cable"),
            ("chest press", "cable fly"),
        )

    return None


class ExerciseSelector:
    """
    Picks exercises for a list of target muscles.

    Selection order per muscle:
    - Catalog lookup by primary muscle
    - Goal and sex exclusion filter
    - Equipment availability
    - Branded machine, then home-gym dumbbell preference
    - Anatomical substitution
    """

    def __init__(self, catalog: CatalogSnapshot):
        """
        Initialize selector.

        Args:
            catalog: Read-only catalog snapshot for this synthesis call
        """
        self.catalog = catalog

    def select_exercises(
        self,
        muscles: Sequence[str],
        is_priority_group: bool,
        equipment: EquipmentContext,
        morpho: MorphoContext
    ) -> List[ExerciseCatalogEntry]:
        """
        Select exercises for each muscle, in order.

        Args:
            muscles: Target muscle names
            is_priority_group: Priority muscles get a second exercise
            equipment: Available equipment and machine brands
            morpho: Goal, sex, and anatomical context

        Returns:
            List of catalog entries (muscles with no usable exercise contribute nothing)
        """
        result = []

        for muscle in muscles:
            candidates = self.catalog.exercises_for_muscle(muscle)
            if not candidates:
                logger.debug(f"No catalog exercises for {muscle}, skipping")
                continue

            filtered = self.apply_exclusion_filter(candidates, morpho)
            if not filtered:
                logger.debug(f"All {muscle} exercises excluded for {morpho.goal.value}, skipping")
                continue

            available = [e for e in filtered if equipment.is_available(e.equipment_type)]
            if not available:
                logger.debug(f"No {muscle} exercise matches equipment, falling back to {filtered[0].name}")
                result.append(filtered[0])
                continue

            chosen = self._find_branded_machine(available, equipment)
            if chosen is None and equipment.is_home_gym:
                chosen = next((e for e in available if e.equipment_type == "dumbbell"), None)
            if chosen is None:
                chosen = available[0]

            if morpho.can_substitute:
                swapped = self.substitute(chosen, morpho, equipment)
                if swapped is not None:
                    logger.info(f"Substituted {chosen.name} -> {swapped.name} for {muscle}")
                    chosen = swapped

            result.append(chosen)

            # Priority muscles: add a second exercise, stretch position preferred
            if is_priority_group and len(available) > 1:
                others = [e for e in available if e.id != chosen.id]
                second = next((e for e in others if e.stretch_position_bonus), None)
                if second is None and others:
                    second = others[0]
                if second is not None:
                    result.append(second)

        return result

    def apply_exclusion_filter(
        self,
        candidates: Sequence[ExerciseCatalogEntry],
        morpho: MorphoContext
    ) -> List[ExerciseCatalogEntry]:
        """Drop exercises matching the goal's banned fragments (and female bans)."""
        banned = [b.lower() for b in morpho.goal.banned_fragments]
        if morpho.is_female:
            banned.extend(FEMALE_BANNED_FRAGMENTS)

        return [
            e for e in candidates
            if not any(fragment in e.name.lower() for fragment in banned)
        ]

    def _find_branded_machine(
        self,
        candidates: Sequence[ExerciseCatalogEntry],
        equipment: EquipmentContext
    ) -> Optional[ExerciseCatalogEntry]:
        """First machine candidate whose linked machine brand is in the gym."""
        if not equipment.brands:
            return None

        for candidate in candidates:
            if candidate.equipment_type != "machine":
                continue
            spec = self.catalog.machine_for(candidate.id)
            if spec is not None and equipment.has_brand(spec.brand):
                return candidate

        return None

    def substitute(
        self,
        exercise: ExerciseCatalogEntry,
        morpho: MorphoContext,
        equipment: EquipmentContext
    ) -> Optional[ExerciseCatalogEntry]:
        """
        Anatomical substitution for a chosen exercise.

        Args:
            exercise: Chosen catalog entry
            morpho: Context with morphotype and profile
            equipment: Available equipment

        Returns:
            Replacement entry, or None to keep the original
        """
        if not morpho.can_substitute:
            return None

        rule = _match_substitution(exercise.name.lower(), morpho.morphotype, morpho.profile)
        if rule is None:
            return None

        muscle = rule.target_muscle or exercise.primary_muscle or rule.default_muscle
        preferred_equipment = (
            rule.preferred_equipment if rule.preferred_equipment is not None
            else sorted(equipment.equipment)
        )

        replacement = self.find_alternative(
            muscle=muscle,
            preferred_equipment=preferred_equipment,
            preferred_names=rule.preferred_names,
            equipment=equipment,
            exclude_id=exercise.id,
            morpho=morpho,
        )
        if replacement is None:
            logger.debug(f"No replacement found for {exercise.name} ({rule.description}), keeping it")
        return replacement

    def find_alternative(
        self,
        muscle: str,
        preferred_equipment: Sequence[str],
        preferred_names: Sequence[str],
        equipment: EquipmentContext,
        exclude_id: str,
        morpho: Optional[MorphoContext] = None
    ) -> Optional[ExerciseCatalogEntry]:
        """
        Search the catalog for a replacement exercise.

        Order: preferred name keyword (equipment-available), then preferred
        equipment type, then anything equipment-available. Candidates banned
        for the goal or sex in `morpho` are never returned.
        """
        candidates = self.catalog.exercises_for_muscle(muscle, exclude_id=exclude_id)
        if morpho is not None:
            candidates = self.apply_exclusion_filter(candidates, morpho)
        if not candidates:
            return None

        for keyword in preferred_names:
            keyword = keyword.lower()
            for c in candidates:
                if keyword in c.name.lower() and equipment.is_available(c.equipment_type):
                    return c

        for eq in preferred_equipment:
            for c in candidates:
                if c.equipment_type == eq:
                    return c

        return next((c for c in candidates if equipment.is_available(c.equipment_type)), None)
