"""Modality and unit catalogs shared by time trials and training days."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Modality:
    value: str
    label: str
    category: str


MODALITIES: tuple[Modality, ...] = (
    Modality("c2_row_erg", "C2 Rowing Erg", "Rowing"),
    Modality("rogue_row_erg", "Rogue Rowing Erg", "Rowing"),
    Modality("c2_bike_erg", "C2 Bike Erg", "Cycling"),
    Modality("echo_bike", "Echo Bike", "Cycling"),
    Modality("assault_bike", "Assault Bike", "Cycling"),
    Modality("airdyne_bike", "AirDyne Bike", "Cycling"),
    Modality("other_bike", "Other Bike", "Cycling"),
    Modality("c2_ski_erg", "C2 Ski Erg", "Ski"),
    Modality("assault_runner", "Assault Runner Treadmill", "Treadmill"),
    Modality("trueform_treadmill", "TrueForm Treadmill", "Treadmill"),
    Modality("motorized_treadmill", "Motorized Treadmill", "Treadmill"),
    Modality("outdoor_run", "Outdoor Run", "Running"),
)

# Units a time-trial score may be recorded in
UNITS: dict[str, str] = {
    "cal": "Calories",
    "watts": "Watts (Average)",
    "mph": "MPH",
    "kph": "KPH",
    "miles": "Miles",
    "meters": "Meters",
}

_BY_VALUE = {m.value: m for m in MODALITIES}


def get_modality(value: str) -> Modality | None:
    """Look up a catalog modality by its stored value."""
    return _BY_VALUE.get(value)


def modality_label(value: str) -> str:
    modality = _BY_VALUE.get(value)
    return modality.label if modality is not None else value
