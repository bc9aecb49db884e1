#!/usr/bin/env python3
"""
Sculptor CLI

Command-line interface for program synthesis and session safety checks.

Usage:
    sculptor program --goal GOAL --frequency FREQ [--equipment EQ ...] [--catalog FILE]
    sculptor brief --readiness SCORE [--cycle-day N | --phase PHASE] EXERCISE...
    sculptor check --exercise NAME --ratios-file FILE
    sculptor killswitch VELOCITY_LOSS
"""

import json
import logging
from datetime import date
from typing import Optional, Tuple

import click
import yaml

from sculptor.biomechanics import (
    AnatomicalProfile,
    assess_risk,
    suggest_alternatives,
    summarize_profile,
)
from sculptor.config import load_synthesis_config
from sculptor.graph import CatalogGraph, CatalogSnapshot, ProgramStore
from sculptor.models import (
    CyclePhase,
    EquipmentContext,
    GoalArchetype,
    TrainingFrequency,
    program_to_dict,
)
from sculptor.synthesis import (
    ProgramAssembler,
    evaluate_anatomical_constraint,
    evaluate_fatigue_kill_switch,
    generate_brief,
)
from sculptor.synthesis.constraints import phase_from_cycle_day
from sculptor.synthesis.planner import format_program_text


def _load_profile(ratios_file: Optional[str]) -> Optional[AnatomicalProfile]:
    if not ratios_file:
        return None
    with open(ratios_file) as f:
        return AnatomicalProfile.from_dict(yaml.safe_load(f) or {})


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose: bool):
    """
    Sculptor - Periodized Program Synthesis
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.option('--goal', required=True, type=click.Choice([g.value for g in GoalArchetype]), help='Goal archetype')
@click.option('--frequency', required=True, type=click.Choice([f.value for f in TrainingFrequency]), help='Training frequency')
@click.option('--equipment', multiple=True, help='Available equipment type (repeatable)')
@click.option('--brand', multiple=True, help='Available machine brand (repeatable)')
@click.option('--sex', default='male', type=click.Choice(['male', 'female']), help='Biological sex')
@click.option('--morphotype', type=str, help='Morphotype classification (e.g. long_limbed)')
@click.option('--ratios-file', type=click.Path(exists=True), help='YAML file with limb ratios')
@click.option('--catalog', 'catalog_path', type=click.Path(exists=True), help='Catalog YAML (default: Neo4j)')
@click.option('--config', 'config_path', type=click.Path(exists=True), help='synthesis.yaml override')
@click.option('--period', 'periods', multiple=True, type=int, help='Only print these period numbers')
@click.option('--json', 'as_json', is_flag=True, help='Print the program as JSON')
@click.option('--save', is_flag=True, help='Persist the program to Neo4j')
def program(
    goal: str,
    frequency: str,
    equipment: Tuple[str, ...],
    brand: Tuple[str, ...],
    sex: str,
    morphotype: Optional[str],
    ratios_file: Optional[str],
    catalog_path: Optional[str],
    config_path: Optional[str],
    periods: Tuple[int, ...],
    as_json: bool,
    save: bool
):
    """Generate a 12-period training program."""
    graph = None

    try:
        if catalog_path is None or save:
            graph = CatalogGraph()
            if not graph.verify_connectivity():
                click.echo("❌ Could not connect to Neo4j")
                return

        catalog = CatalogSnapshot.from_yaml(catalog_path) if catalog_path else graph.load_snapshot()
        assembler = ProgramAssembler(catalog, load_synthesis_config(config_path))

        training_program = assembler.generate_program(
            goal=goal,
            frequency=frequency,
            equipment=EquipmentContext.create(equipment, brand),
            sex=sex,
            morphotype=morphotype,
            profile=_load_profile(ratios_file),
            today=date.today(),
        )

        if as_json:
            click.echo(json.dumps(program_to_dict(training_program), indent=2))
        else:
            click.echo(format_program_text(training_program, periods=list(periods)))

        if save:
            program_id = ProgramStore(graph).save_program(training_program)
            click.echo(f"✓ Saved program {program_id}")

    except Exception as e:
        click.echo(f"❌ Error generating program: {e}")
    finally:
        if graph is not None:
            graph.close()


@cli.command()
@click.option('--readiness', required=True, type=float, help='Readiness score (0-100)')
@click.option('--cycle-day', type=int, help='Day of menstrual cycle (1-based)')
@click.option('--phase', type=click.Choice([p.value for p in CyclePhase]), help='Cycle phase')
@click.option('--ratios-file', type=click.Path(exists=True), help='YAML file with limb ratios')
@click.argument('exercises', nargs=-1)
def brief(
    readiness: float,
    cycle_day: Optional[int],
    phase: Optional[str],
    ratios_file: Optional[str],
    exercises: Tuple[str, ...]
):
    """Show a pre-session brief."""
    try:
        if cycle_day is not None:
            phase = phase_from_cycle_day(cycle_day).value

        session_brief = generate_brief(readiness, phase, _load_profile(ratios_file), exercises)

        click.echo("=" * 60)
        click.echo("SESSION BRIEF")
        click.echo("=" * 60)
        click.echo(f"\nReadiness: {session_brief.readiness_level}")
        click.echo(f"Focus: {session_brief.recommended_focus}")
        if session_brief.cycle_note:
            click.echo(f"Cycle: {session_brief.cycle_note}")

        if session_brief.warnings:
            click.echo("\nSwaps:")
            for warning in session_brief.warnings:
                click.echo(f"  ⚠  {warning}")

        click.echo("\n" + "=" * 60)

    except Exception as e:
        click.echo(f"❌ Error: {e}")


@cli.command()
@click.option('--exercise', required=True, help='Exercise name')
@click.option('--ratios-file', required=True, type=click.Path(exists=True), help='YAML file with limb ratios')
def check(exercise: str, ratios_file: str):
    """Check an exercise against the user's proportions."""
    try:
        profile = _load_profile(ratios_file)
        decision = evaluate_anatomical_constraint(profile, exercise)
        risk = assess_risk(exercise, profile)

        click.echo("=" * 60)
        click.echo(f"ANATOMICAL CHECK: {exercise}")
        click.echo("=" * 60)

        if decision:
            click.secho("\n✗ BANNED", fg='red')
            click.echo(f"Reason: {decision.reason}")
            click.echo(f"Alternative: {decision.suggested_alternative}")
        else:
            click.secho("\n✓ ALLOWED", fg='green')

        risk_color = {'optimal': 'green', 'caution': 'yellow'}.get(risk.value, 'red')
        click.echo("Risk: ", nl=False)
        click.secho(risk.value.upper(), fg=risk_color)

        alternatives = suggest_alternatives(exercise)
        if alternatives:
            click.echo(f"Alternatives: {', '.join(alternatives)}")

        click.echo(f"\n{summarize_profile(profile)}")
        click.echo("\n" + "=" * 60)

    except Exception as e:
        click.echo(f"❌ Error: {e}")


@cli.command()
@click.argument('velocity_loss', type=float)
def killswitch(velocity_loss: float):
    """Evaluate the velocity-loss kill switch for a set."""
    if evaluate_fatigue_kill_switch(velocity_loss):
        click.secho(f"STOP: {velocity_loss:.1f}% velocity loss exceeds 20%. End the set.", fg='red')
    else:
        click.secho(f"OK: {velocity_loss:.1f}% velocity loss", fg='green')


if __name__ == '__main__':
    cli()
