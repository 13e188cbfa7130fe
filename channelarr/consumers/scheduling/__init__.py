"""Schedule generation package.

ProgramCatalog resolves what a channel can play, shuffle_deterministic
orders Shuffle-mode cycles, ScheduleEngine lays the cycle onto the
timeline, and SlotEnricher adds guide metadata.
"""

from .catalog import ProgramCatalog
from .engine import NOW_PLAYING_WINDOW, ScheduleEngine, locate
from .enricher import SlotEnricher, apply_metadata
from .shuffle import SplitMix64, cycle_seed, fnv1a_64, shuffle_deterministic

__all__ = [
    # Engine
    "ScheduleEngine",
    "NOW_PLAYING_WINDOW",
    "locate",
    # Catalog
    "ProgramCatalog",
    # Enrichment
    "SlotEnricher",
    "apply_metadata",
    # Shuffling
    "SplitMix64",
    "cycle_seed",
    "fnv1a_64",
    "shuffle_deterministic",
]
