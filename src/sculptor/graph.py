"""
Neo4j catalog access and program storage.

The engine never queries the database directly. A CatalogSnapshot is read
once per synthesis call and passed explicitly to every component, so a
concurrent catalog edit is only visible to the next call.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml
from neo4j import Driver, GraphDatabase

from .config import load_neo4j_settings
from .models import ExerciseCatalogEntry, MachineSpec, TrainingProgram

logger = logging.getLogger(__name__)


class CatalogSnapshot:
    """
    Immutable, read-only view of the exercise catalog.

    Query results are cached per snapshot; entries are frozen dataclasses
    held in tuples, so repeated lookups during one synthesis call always
    agree.
    """

    def __init__(self, entries: Iterable[ExerciseCatalogEntry]):
        self._entries: Tuple[ExerciseCatalogEntry, ...] = tuple(
            sorted(entries, key=lambda e: (e.name, e.id))
        )
        self._by_id = {e.id: e for e in self._entries}
        self._muscle_cache: Dict[str, Tuple[ExerciseCatalogEntry, ...]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> 'CatalogSnapshot':
        return cls(ExerciseCatalogEntry.from_dict(r) for r in records)

    @classmethod
    def from_yaml(cls, path) -> 'CatalogSnapshot':
        """
        Load a catalog seed file.

        Args:
            path: YAML file with a top-level 'exercises' list

        Returns:
            CatalogSnapshot
        """
        with open(Path(path)) as f:
            data = yaml.safe_load(f) or {}

        snapshot = cls.from_records(data.get('exercises', []))
        logger.info(f"Loaded {len(snapshot)} catalog exercises from {path}")
        return snapshot

    def get(self, exercise_id: str) -> Optional[ExerciseCatalogEntry]:
        return self._by_id.get(exercise_id)

    def exercises_for_muscle(
        self,
        muscle: str,
        exclude_id: Optional[str] = None
    ) -> List[ExerciseCatalogEntry]:
        """
        Exercises whose primary muscle equals `muscle` (case-insensitive).

        Args:
            muscle: Primary muscle name
            exclude_id: Optional exercise ID to leave out

        Returns:
            Entries sorted by name ascending
        """
        key = muscle.strip().lower()
        if key not in self._muscle_cache:
            self._muscle_cache[key] = tuple(
                e for e in self._entries if e.primary_muscle.strip().lower() == key
            )
        return [e for e in self._muscle_cache[key] if e.id != exclude_id]

    def machine_for(self, exercise_id: str) -> Optional[MachineSpec]:
        """Machine specification linked to an exercise, if any."""
        entry = self._by_id.get(exercise_id)
        return entry.machine if entry else None


class CatalogGraph:
    """Connection to the Neo4j graph holding the catalog and saved programs."""

    def __init__(self, config_path: Optional[str] = None, driver: Optional[Driver] = None):
        """
        Initialize connection to Neo4j.

        Args:
            config_path: Path to neo4j.yaml config file. If None, uses default.
            driver: Pre-built driver (skips settings resolution)
        """
        settings = load_neo4j_settings(config_path)
        self.database = settings["database"]

        if driver is not None:
            self.driver = driver
            return

        if not settings["password"]:
            raise ValueError("NEO4J_PASSWORD environment variable must be set")

        self.driver = GraphDatabase.driver(
            settings["uri"],
            auth=(settings["user"], settings["password"])
        )

    def close(self):
        """Close the database connection."""
        if self.driver:
            self.driver.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def verify_connectivity(self) -> bool:
        try:
            self.driver.verify_connectivity()
            return True
        except Exception as e:
            logger.error(f"Connection failed: {e}")
            return False

    def execute_query(
        self,
        query: str,
        parameters: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """
        Execute a Cypher query and return results.

        Args:
            query: Cypher query string
            parameters: Optional query parameters

        Returns:
            List of result records as dictionaries
        """
        with self.driver.session(database=self.database) as session:
            result = session.run(query, parameters or {})
            return [dict(record) for record in result]

    def load_snapshot(self) -> CatalogSnapshot:
        """Read the full catalog once, with linked machine specs."""
        query = """
        MATCH (e:Exercise)
        OPTIONAL MATCH (e)-[:USES_MACHINE]->(m:MachineSpec)
        RETURN
            e.id as id,
            e.name as name,
            e.category as category,
            e.primary_muscle as primary_muscle,
            e.secondary_muscles as secondary_muscles,
            e.equipment_type as equipment_type,
            e.stretch_position_bonus as stretch_position_bonus,
            e.tags as tags,
            CASE WHEN m IS NULL THEN null ELSE {
                name: m.name,
                brand: m.brand,
                resistance_profile: m.resistance_profile
            } END as machine
        ORDER BY e.name
        """

        records = [
            r for r in self.execute_query(query)
            if r.get('name') and r.get('primary_muscle')
        ]
        snapshot = CatalogSnapshot.from_records(records)
        logger.info(f"Catalog snapshot: {len(snapshot)} exercises")
        return snapshot


class ProgramStore:
    """Persists an assembled program in a single write transaction."""

    def __init__(self, graph: CatalogGraph):
        self.graph = graph

    def save_program(self, program: TrainingProgram, person_id: Optional[str] = None) -> str:
        """
        Write the full program tree.

        Args:
            program: Fully assembled TrainingProgram
            person_id: Optional Person node to attach the program to

        Returns:
            ID of the created TrainingProgram node

        Raises:
            ValueError: If a prescribed exercise has no Exercise node (nothing is written)
        """
        with self.graph.driver.session(database=self.graph.database) as session:
            program_id = session.execute_write(self._write_program, program, person_id)

        logger.info(f"Saved program {program_id} ({program.name})")
        return program_id

    @staticmethod
    def _write_program(tx, program: TrainingProgram, person_id: Optional[str]) -> str:
        result = tx.run("""
            CREATE (p:TrainingProgram {
                id: randomUUID(),
                name: $name,
                goal: $goal,
                frequency: $frequency,
                morphotype_at_creation: $morphotype,
                start_date: date($start_date),
                end_date: date($end_date)
            })
            WITH p
            OPTIONAL MATCH (person:Person {id: $person_id})
            FOREACH (_ IN CASE WHEN person IS NULL THEN [] ELSE [1] END |
                CREATE (person)-[:FOLLOWS]->(p))
            RETURN p.id as id
        """, {
            'name': program.name,
            'goal': program.goal.value,
            'frequency': program.frequency.value,
            'morphotype': program.morphotype_at_creation,
            'start_date': program.start_date.isoformat(),
            'end_date': program.end_date.isoformat(),
            'person_id': person_id,
        })
        program_id = result.single()['id']

        for period in program.periods:
            days = [
                {
                    'index': day.index,
                    'label': day.label,
                    'date': day.scheduled_date.isoformat(),
                    'is_rest_day': day.is_rest_day,
                    'duration': day.estimated_duration_minutes,
                    'exercises': [
                        {
                            'exercise_id': ex.exercise.id,
                            'order': ex.order,
                            'sets': ex.target_sets,
                            'reps': ex.target_reps,
                            'rpe': ex.target_rpe,
                            'rest_seconds': ex.rest_seconds,
                            'tempo': ex.tempo,
                            'is_priority': ex.is_priority,
                            'why': ex.why,
                            'priority_reason': ex.priority_reason,
                        }
                        for ex in day.exercises
                    ],
                }
                for day in period.days
            ]

            result = tx.run("""
                MATCH (p:TrainingProgram {id: $program_id})
                CREATE (p)-[:HAS_PERIOD]->(w:Period {
                    number: $number,
                    type: $type,
                    volume_modifier: $volume_modifier,
                    intensity_modifier: $intensity_modifier
                })
                WITH w
                UNWIND $days as d
                CREATE (w)-[:HAS_DAY]->(day:Day {
                    index: d.index,
                    label: d.label,
                    date: date(d.date),
                    is_rest_day: d.is_rest_day,
                    estimated_duration_minutes: d.duration
                })
                WITH day, d
                UNWIND d.exercises as x
                MATCH (e:Exercise {id: x.exercise_id})
                CREATE (day)-[:PRESCRIBES]->(pe:PrescribedExercise {
                    order: x.order,
                    target_sets: x.sets,
                    target_reps: x.reps,
                    target_rpe: x.rpe,
                    rest_seconds: x.rest_seconds,
                    tempo: x.tempo,
                    is_priority: x.is_priority,
                    why: x.why,
                    priority_reason: x.priority_reason
                })-[:INSTANCE_OF]->(e)
                RETURN count(pe) as created
            """, {
                'program_id': program_id,
                'number': period.number,
                'type': period.period_type.value,
                'volume_modifier': period.volume_modifier,
                'intensity_modifier': period.intensity_modifier,
                'days': days,
            })

            expected = sum(len(d['exercises']) for d in days)
            created = result.single()['created']
            if created != expected:
                # Unmatched Exercise ids drop rows silently; raise to roll back
                raise ValueError(
                    f"Period {period.number}: stored {created} of {expected} prescribed "
                    "exercises; catalog exercises are missing from the graph"
                )

        return program_id
