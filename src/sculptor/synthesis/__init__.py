"""
Program synthesis engine.

Generates a 12-period training program from:
- Goal archetype (priority and maintenance muscles)
- Gym equipment and machine brands
- Optional anatomical profile and morphotype
- Safety constraints (anatomy, cycle phase, fatigue)
"""

from .constraints import (
    evaluate_anatomical_constraint,
    evaluate_cycle_phase_constraint,
    evaluate_fatigue_kill_switch,
    generate_brief,
)
from .selection import ExerciseSelector, MorphoContext
from .periodization import PeriodizationPlanner, build_period_skeleton
from .planner import ProgramAssembler

__all__ = [
    'evaluate_anatomical_constraint',
    'evaluate_cycle_phase_constraint',
    'evaluate_fatigue_kill_switch',
    'generate_brief',
    'ExerciseSelector',
    'MorphoContext',
    'PeriodizationPlanner',
    'build_period_skeleton',
    'ProgramAssembler',
]
