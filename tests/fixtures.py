"""Shared in-memory catalog for the test suite."""

from sculptor.biomechanics import AnatomicalProfile, Morphotype
from sculptor.graph import CatalogSnapshot
from sculptor.models import EquipmentContext, ExerciseCatalogEntry, MachineSpec

FULL_GYM = EquipmentContext.create(["barbell", "dumbbell", "cable", "machine", "bodyweight"])
HOME_GYM = EquipmentContext.create(["dumbbell", "bodyweight"])


def entry(exercise_id, name, muscle, equipment=None, stretch=False, brand=None):
    machine = MachineSpec(name=name, brand=brand) if brand else None
    return ExerciseCatalogEntry(
        id=exercise_id,
        name=name,
        primary_muscle=muscle,
        equipment_type=equipment,
        stretch_position_bonus=stretch,
        machine=machine,
    )


CATALOG_ENTRIES = [
    entry("lat_raise_cable", "Cable Lateral Raise", "Side Delts", "cable", stretch=True),
    entry("lat_raise_db", "Dumbbell Lateral Raise", "Side Delts", "dumbbell"),
    entry("lat_raise_machine", "Machine Lateral Raise", "Side Delts", "machine", brand="Pure Kraft"),
    entry("incline_bb", "Incline Barbell Press", "Upper Chest", "barbell"),
    entry("incline_db", "Incline DB Press", "Upper Chest", "dumbbell", stretch=True),
    entry("pulldown", "Lat Pulldown", "Lats", "cable", stretch=True),
    entry("pull_up", "Pull-Up", "Lats", "bodyweight"),
    entry("face_pull", "Face Pull", "Rear Delts", "cable"),
    entry("shrug", "Barbell Shrug", "Traps", "barbell"),
    entry("back_squat", "Barbell Back Squat", "Quads", "barbell", stretch=True),
    entry("bulgarian", "Bulgarian Split Squat", "Quads", "dumbbell", stretch=True),
    entry("leg_press", "Leg Press", "Quads", "machine"),
    entry("conv_deadlift", "Conventional Deadlift", "Hamstrings", "barbell"),
    entry("rdl", "Romanian Deadlift", "Hamstrings", "barbell", stretch=True),
    entry("trap_bar", "Trap Bar Deadlift", "Hamstrings", "barbell"),
    entry("hip_thrust", "Barbell Hip Thrust", "Glutes", "barbell"),
    entry("kickback", "Cable Glute Kickback", "Glutes", "cable"),
    entry("cable_curl", "Cable Curl", "Biceps", "cable"),
    entry("pushdown", "Triceps Pushdown", "Triceps", "cable"),
    entry("bench", "Barbell Bench Press", "Chest", "barbell", stretch=True),
    entry("cable_fly", "Cable Fly", "Chest", "cable", stretch=True),
    entry("chest_press", "Chest Press Machine", "Chest", "machine"),
    entry("dips", "Dips", "Chest", "bodyweight"),
    entry("db_bench", "Dumbbell Bench Press", "Chest", "dumbbell", stretch=True),
    entry("seated_row", "Seated Cable Row", "Upper Back", "cable"),
    entry("oblique_crunch", "Oblique Crunch", "Core", "bodyweight"),
    entry("plank", "Plank", "Core", "bodyweight"),
    entry("russian_twist", "Russian Twist", "Core", "bodyweight"),
    entry("side_bend", "Dumbbell Side Bend", "Core", "dumbbell"),
]


def build_catalog(entries=None):
    return CatalogSnapshot(CATALOG_ENTRIES if entries is None else entries)


def profile(morphotype=None, **ratios):
    values = {
        "femur_to_torso": 0.70,
        "humerus_to_torso": 0.45,
        "tibia_to_femur": 0.95,
        "shoulder_to_hip": 1.35,
        "arm_span_to_height": 1.0,
    }
    values.update(ratios)
    return AnatomicalProfile(morphotype=morphotype, **values)


__all__ = [
    "CATALOG_ENTRIES",
    "FULL_GYM",
    "HOME_GYM",
    "Morphotype",
    "build_catalog",
    "entry",
    "profile",
]
