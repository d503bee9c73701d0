"""Error types and per-run diagnostic counters for the priority index pipeline."""

import json


class ConfigurationError(ValueError):
    """Raised when run parameters invalidate the whole computation."""


class Diagnostics:
    """Counters for recoverable per-record anomalies seen during a run.

    Malformed or unmatched rows are skipped rather than raised; each skip increments one of the counters
    below so the caller can tell how much input was dropped.

    Counters:

        malformed_records: population rows with a negative (or non-integer) age or count
        unknown_area_records: population rows referencing an area missing from the registry
        zero_population_areas: areas whose total population is zero (receptivity undefined)
        unknown_centers: population centers whose identifier is missing from the registry
        missing_vulnerability: areas with a receptivity score but no vulnerability score
        missing_receptivity: areas with a vulnerability score but no receptivity score
    """

    COUNTERS = (
        "malformed_records",
        "unknown_area_records",
        "zero_population_areas",
        "unknown_centers",
        "missing_vulnerability",
        "missing_receptivity",
    )

    def __init__(self, **counts):
        for name in self.COUNTERS:
            setattr(self, name, 0)
        for name, value in counts.items():
            if name not in self.COUNTERS:
                raise ValueError(f"Unknown diagnostic counter '{name}'.")
            setattr(self, name, value)

    @property
    def skipped_areas(self) -> int:
        """Number of areas dropped by the receptivity/vulnerability join."""
        return self.missing_vulnerability + self.missing_receptivity

    def to_dict(self):
        return {name: getattr(self, name) for name in self.COUNTERS}

    def __iadd__(self, other):
        for name in self.COUNTERS:
            setattr(self, name, getattr(self, name) + getattr(other, name))
        return self

    def __eq__(self, other):
        return isinstance(other, Diagnostics) and self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def __repr__(self) -> str:
        return f"Diagnostics({self.to_dict()!s})"
