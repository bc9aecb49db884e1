"""
Configuration loading.

YAML files under config/ with environment overrides via python-dotenv.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


@dataclass(frozen=True)
class SynthesisConfig:
    """Volume allocation settings shared by every synthesis call."""
    weekly_sets: Dict[str, int] = field(default_factory=lambda: {
        "full_body_3": 18,
        "upper_lower_4": 24,
    })
    priority_ratio: float = 0.80
    max_session_minutes: int = 60
    warmup_minutes: int = 5
    set_seconds: int = 45

    def weekly_sets_for(self, frequency_value: str) -> int:
        return self.weekly_sets[frequency_value]


def load_synthesis_config(config_path: Optional[str] = None) -> SynthesisConfig:
    """
    Load volume configuration.

    Args:
        config_path: Path to synthesis.yaml. If None, uses config/synthesis.yaml

    Returns:
        SynthesisConfig (built-in defaults for any key the file omits)
    """
    load_dotenv()

    if config_path is None:
        config_path = CONFIG_DIR / "synthesis.yaml"

    data = {}
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}

    defaults = SynthesisConfig()
    weekly_sets = dict(defaults.weekly_sets)
    weekly_sets.update({str(k): int(v) for k, v in (data.get("weekly_sets") or {}).items()})

    priority_ratio = float(os.getenv(
        "SCULPTOR_PRIORITY_RATIO",
        data.get("priority_ratio", defaults.priority_ratio)
    ))
    if not 0.0 < priority_ratio < 1.0:
        raise ValueError(f"priority_ratio must be between 0 and 1, got {priority_ratio}")

    return SynthesisConfig(
        weekly_sets=weekly_sets,
        priority_ratio=priority_ratio,
        max_session_minutes=int(data.get("max_session_minutes", defaults.max_session_minutes)),
        warmup_minutes=int(data.get("warmup_minutes", defaults.warmup_minutes)),
        set_seconds=int(data.get("set_seconds", defaults.set_seconds)),
    )


def load_neo4j_settings(config_path: Optional[str] = None) -> Dict[str, Optional[str]]:
    """
    Resolve Neo4j connection settings.

    Environment variables (NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD,
    NEO4J_DATABASE) win over config/neo4j.yaml.
    """
    load_dotenv()

    if config_path is None:
        config_path = CONFIG_DIR / "neo4j.yaml"

    config = {}
    if Path(config_path).exists():
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

    return {
        "uri": os.getenv("NEO4J_URI", config.get("uri", "bolt://localhost:7687")),
        "user": os.getenv("NEO4J_USER", config.get("user", "neo4j")),
        "password": os.getenv("NEO4J_PASSWORD"),
        "database": os.getenv("NEO4J_DATABASE", config.get("database", "neo4j")),
    }
