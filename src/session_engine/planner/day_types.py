"""Day type tables — display styles, generation shapes and delegation.

Everything here is lookup data. The planner resolves a stored day type tag
to a PlanShape by following ``DAY_TYPE_DELEGATES`` (second-stage variants
reuse their parent's rule) and then reading ``DAY_TYPE_SHAPES``.
"""

from __future__ import annotations

from dataclasses import dataclass

from session_engine.models.enums import DayType, PlanShape


@dataclass(frozen=True)
class DayTypeStyle:
    """Display name and badge color for a day type."""

    display_name: str
    color: str


DEFAULT_DISPLAY_NAME = "Workout"
DEFAULT_COLOR = "#6b7280"

DAY_TYPE_STYLES: dict[DayType, DayTypeStyle] = {
    DayType.TIME_TRIAL: DayTypeStyle("Time Trial", "#ef4444"),
    DayType.ENDURANCE: DayTypeStyle("Endurance", "#10b981"),
    DayType.ANAEROBIC: DayTypeStyle("Anaerobic", "#f59e0b"),
    DayType.MAX_AEROBIC_POWER: DayTypeStyle("Max Aerobic Power", "#8b5cf6"),
    DayType.INTERVAL: DayTypeStyle("Interval", "#3b82f6"),
    DayType.POLARIZED: DayTypeStyle("Polarized", "#ec4899"),
    DayType.THRESHOLD: DayTypeStyle("Threshold", "#06b6d4"),
    DayType.TEMPO: DayTypeStyle("Tempo", "#84cc16"),
    DayType.RECOVERY: DayTypeStyle("Recovery", "#6b7280"),
    DayType.FLUX: DayTypeStyle("Flux", "#14b8a6"),
    DayType.FLUX_STAGES: DayTypeStyle("Flux Stages", "#14b8a6"),
    DayType.DEVOUR: DayTypeStyle("Devour", "#a855f7"),
    DayType.TOWERS: DayTypeStyle("Towers", "#f97316"),
    DayType.TOWERS_BLOCK_1: DayTypeStyle("Towers", "#f97316"),
    DayType.AFTERBURNER: DayTypeStyle("Afterburner", "#dc2626"),
    DayType.SYNTHESIS: DayTypeStyle("Synthesis", "#6366f1"),
    DayType.HYBRID_ANAEROBIC: DayTypeStyle("Hybrid Anaerobic", "#f43f5e"),
    DayType.HYBRID_AEROBIC: DayTypeStyle("Hybrid Aerobic", "#22c55e"),
    DayType.ASCENDING: DayTypeStyle("Ascending", "#eab308"),
    DayType.DESCENDING: DayTypeStyle("Descending", "#a16207"),
    DayType.ASCENDING_DEVOUR: DayTypeStyle("Ascending Devour", "#eab308"),
    DayType.DESCENDING_DEVOUR: DayTypeStyle("Descending Devour", "#a16207"),
    DayType.INFINITY: DayTypeStyle("Infinity", "#7c3aed"),
    DayType.INFINITY_BLOCK_1: DayTypeStyle("Infinity", "#7c3aed"),
    DayType.INFINITY_BLOCK_2: DayTypeStyle("Infinity", "#7c3aed"),
    DayType.ATOMIC: DayTypeStyle("Atomic", "#06b6d4"),
    DayType.ATOMIC_BLOCK_2: DayTypeStyle("Atomic", "#06b6d4"),
    DayType.ROCKET_RACES_A: DayTypeStyle("Rocket Race A", "#ef4444"),
    DayType.ROCKET_RACES_B: DayTypeStyle("Rocket Race B", "#ef4444"),
}

# Variant day types that reuse another day type's generation rule
DAY_TYPE_DELEGATES: dict[DayType, DayType] = {
    DayType.TOWERS_BLOCK_1: DayType.TOWERS,
    DayType.ATOMIC_BLOCK_2: DayType.ATOMIC,
    DayType.INFINITY_BLOCK_1: DayType.INFINITY,
    DayType.INFINITY_BLOCK_2: DayType.INFINITY,
    DayType.ROCKET_RACES_B: DayType.ROCKET_RACES_A,
}

# Generation rule for every day type that does not delegate
DAY_TYPE_SHAPES: dict[DayType, PlanShape] = {
    DayType.TIME_TRIAL: PlanShape.CONTINUOUS,
    DayType.ENDURANCE: PlanShape.CONTINUOUS,
    DayType.TOWERS: PlanShape.TOWERS,
    DayType.ATOMIC: PlanShape.ATOMIC,
    DayType.INFINITY: PlanShape.INFINITY,
    DayType.ASCENDING: PlanShape.ASCENDING,
    DayType.DESCENDING_DEVOUR: PlanShape.DESCENDING_DEVOUR,
    DayType.ANAEROBIC: PlanShape.STANDARD,
    DayType.MAX_AEROBIC_POWER: PlanShape.STANDARD,
    DayType.INTERVAL: PlanShape.STANDARD,
    DayType.POLARIZED: PlanShape.STANDARD,
    DayType.THRESHOLD: PlanShape.STANDARD,
    DayType.TEMPO: PlanShape.STANDARD,
    DayType.RECOVERY: PlanShape.STANDARD,
    DayType.FLUX: PlanShape.STANDARD,
    DayType.FLUX_STAGES: PlanShape.STANDARD,
    DayType.DEVOUR: PlanShape.STANDARD,
    DayType.AFTERBURNER: PlanShape.STANDARD,
    DayType.SYNTHESIS: PlanShape.STANDARD,
    DayType.HYBRID_ANAEROBIC: PlanShape.STANDARD,
    DayType.HYBRID_AEROBIC: PlanShape.STANDARD,
    DayType.DESCENDING: PlanShape.STANDARD,
    DayType.ASCENDING_DEVOUR: PlanShape.STANDARD,
    DayType.ROCKET_RACES_A: PlanShape.STANDARD,
}


def resolve_day_type(day_type: DayType) -> DayType:
    """Follow the delegation table to the day type that owns the rule."""
    seen = {day_type}
    while day_type in DAY_TYPE_DELEGATES:
        day_type = DAY_TYPE_DELEGATES[day_type]
        if day_type in seen:
            raise ValueError(f"Delegation cycle at {day_type.value}")
        seen.add(day_type)
    return day_type


def shape_for(tag: str | None) -> PlanShape:
    """Return the generation rule for a stored tag (unknown -> STANDARD)."""
    day_type = DayType.from_tag(tag)
    if day_type is None:
        return PlanShape.STANDARD
    return DAY_TYPE_SHAPES[resolve_day_type(day_type)]


def display_name(tag: str | None) -> str:
    """Human-readable label for a tag; unknown tags are title-cased."""
    if not tag:
        return DEFAULT_DISPLAY_NAME
    day_type = DayType.from_tag(tag)
    if day_type is not None:
        return DAY_TYPE_STYLES[day_type].display_name
    return tag.replace("_", " ").title()


def color(tag: str | None) -> str:
    day_type = DayType.from_tag(tag)
    if day_type is None:
        return DEFAULT_COLOR
    return DAY_TYPE_STYLES[day_type].color
