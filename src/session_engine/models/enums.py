"""Enumerations and engine constants for interval session planning.

Day types are the stored workout tags. Each one resolves to a PlanShape
(the interval generation rule) in ``session_engine.planner.day_types``.
"""

from enum import Enum, IntEnum, auto


class DayType(str, Enum):
    """Workout day type tags as stored with each training day."""

    TIME_TRIAL = "time_trial"
    ENDURANCE = "endurance"
    ANAEROBIC = "anaerobic"
    MAX_AEROBIC_POWER = "max_aerobic_power"
    INTERVAL = "interval"
    POLARIZED = "polarized"
    THRESHOLD = "threshold"
    TEMPO = "tempo"
    RECOVERY = "recovery"
    FLUX = "flux"
    FLUX_STAGES = "flux_stages"
    DEVOUR = "devour"
    TOWERS = "towers"
    TOWERS_BLOCK_1 = "towers_block_1"
    AFTERBURNER = "afterburner"
    SYNTHESIS = "synthesis"
    HYBRID_ANAEROBIC = "hybrid_anaerobic"
    HYBRID_AEROBIC = "hybrid_aerobic"
    ASCENDING = "ascending"
    DESCENDING = "descending"
    ASCENDING_DEVOUR = "ascending_devour"
    DESCENDING_DEVOUR = "descending_devour"
    INFINITY = "infinity"
    INFINITY_BLOCK_1 = "infinity_block_1"
    INFINITY_BLOCK_2 = "infinity_block_2"
    ATOMIC = "atomic"
    ATOMIC_BLOCK_2 = "atomic_block_2"
    ROCKET_RACES_A = "rocket_races_a"
    ROCKET_RACES_B = "rocket_races_b"

    @classmethod
    def from_tag(cls, tag: str | None) -> "DayType | None":
        """Resolve a stored tag, returning None for unknown or missing tags."""
        if not tag:
            return None
        try:
            return cls(tag)
        except ValueError:
            return None


class PlanShape(IntEnum):
    """Interval generation rules — one generator function per member."""

    CONTINUOUS = auto()
    TOWERS = auto()
    ATOMIC = auto()
    INFINITY = auto()
    ASCENDING = auto()
    DESCENDING_DEVOUR = auto()
    STANDARD = auto()


class Phase(IntEnum):
    """Timer phase within a single interval."""

    WORK = auto()
    REST = auto()


class PaceSource(str, Enum):
    """Where a target pace came from."""

    LEARNED_MAX = "learned_max"
    METRICS_ADJUSTED = "metrics_adjusted"
    BASELINE_ONLY = "baseline_only"


class DayStatus(str, Enum):
    """Where a program day stands for a user."""

    COMPLETED = "completed"
    CURRENT = "current"
    AVAILABLE = "available"
    LOCKED = "locked"


# Day types whose targets use the learned max pace and whose results always
# feed the performance metrics.
MAX_EFFORT_DAY_TYPES = frozenset({
    DayType.TIME_TRIAL.value,
    DayType.ANAEROBIC.value,
    DayType.ROCKET_RACES_A.value,
    DayType.ROCKET_RACES_B.value,
})


def is_max_effort_day(day_type: str | None) -> bool:
    """Return True for time trial, anaerobic and rocket race days."""
    return getattr(day_type, "value", day_type) in MAX_EFFORT_DAY_TYPES


# ---------------------------------------------------------------------------
# Block parameter defaults (seconds)
# ---------------------------------------------------------------------------
DEFAULT_WORK_DURATION_S = 60
DEFAULT_REST_DURATION_S = 0
DEFAULT_ROUNDS = 1
MAX_BLOCKS = 4

# Fallback interval when nothing else can be planned
FALLBACK_WORK_TIME_S = 1200
DEMO_DURATION_MIN = 20

# ---------------------------------------------------------------------------
# Shape constants
# ---------------------------------------------------------------------------
TOWER_MULTIPLIERS = (0.5, 1.0, 1.5, 2.0, 2.5)
TOWER_DEFAULT_REST_S = 60

ATOMIC_WORK_FRACTION = 0.3
ATOMIC_REST_FRACTION = 0.2
ATOMIC_DEFAULT_REST_S = 60

INFINITY_DEFAULT_PACE_RANGE = (0.85, 1.0)
INFINITY_PACE_PROGRESSION = "increasing"

ASCENDING_DEFAULT_INCREMENT_S = 30
DESCENDING_DEFAULT_INCREMENT_S = 10

# Midpoint multiplier used when an interval carries no pace range
DEFAULT_PACE_MULTIPLIER = 1.0

# ---------------------------------------------------------------------------
# Result validation
# ---------------------------------------------------------------------------
MAX_HEART_RATE_BPM = 220
RPE_MIN = 1
RPE_MAX = 10

# ---------------------------------------------------------------------------
# Time trial baseline: 10-minute maximal effort
# ---------------------------------------------------------------------------
TIME_TRIAL_DURATION_S = 600
PREVIOUS_TRIALS_LIMIT = 5

# ---------------------------------------------------------------------------
# Performance metrics blending (storage side)
# ---------------------------------------------------------------------------
ROLLING_RATIO_ALPHA = 0.3
HISTORY_TREND_SPAN = 5

# Program versions
DEFAULT_PROGRAM_VERSION = "5-day"
FIRST_PROGRAM_DAY = 1
