"""Age-stratified population records and a columnar table for per-area sums."""

from collections import namedtuple
from numbers import Integral

import click
import numpy as np

from priority_index.errors import Diagnostics

AgePopulationRecord = namedtuple("AgePopulationRecord", ["area_id", "age", "count"])


def _well_formed(record) -> bool:
    for value in (record.age, record.count):
        if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
            return False
    return True


def screen_records(records, registry=None, diagnostics=None, verbose=False):
    """
    Drop population rows that cannot be used, counting each rejection.

    Parameters:

        records (iterable): AgePopulationRecord (or ``(area_id, age, count)``) rows.
        registry (AreaRegistry, optional): If given, rows whose area is not registered are rejected as unknown.
        diagnostics (Diagnostics, optional): Receives ``malformed_records`` and ``unknown_area_records`` counts.
        verbose (bool): If True, report the rejection counts.

    Returns:

        list of AgePopulationRecord: The rows that passed.
    """

    if diagnostics is None:
        diagnostics = Diagnostics()

    kept = []
    malformed = unknown = 0
    for record in records:
        record = AgePopulationRecord(*record)
        if not _well_formed(record):
            malformed += 1
        elif registry is not None and record.area_id not in registry:
            unknown += 1
        else:
            kept.append(record)

    diagnostics.malformed_records += malformed
    diagnostics.unknown_area_records += unknown

    if verbose:
        click.echo(f"Population rows: {len(kept):,} kept, {malformed:,} malformed, {unknown:,} unknown area")

    return kept


class PopulationTable:
    """Population counts by (area, age) stored as parallel NumPy columns.

    Areas are ordered by first appearance in the records unless ``area_ids`` fixes the order,
    in which case areas without any rows are still present with zero population.
    """

    def __init__(self, records, registry=None, area_ids=None, diagnostics=None, verbose=False):
        kept = screen_records(records, registry=registry, diagnostics=diagnostics, verbose=verbose)

        self._ids = list(area_ids) if area_ids is not None else list(dict.fromkeys(record.area_id for record in kept))
        self._position = {area_id: i for i, area_id in enumerate(self._ids)}

        kept = [record for record in kept if record.area_id in self._position]
        self._area = np.array([self._position[record.area_id] for record in kept], dtype=np.int64)
        self._age = np.array([record.age for record in kept], dtype=np.int64)
        self._count = np.array([record.count for record in kept], dtype=np.int64)

        return

    @property
    def ids(self) -> list:
        return list(self._ids)

    def __len__(self):
        return len(self._ids)

    def __contains__(self, area_id):
        return area_id in self._position

    def sum_ages(self, min_age=0, max_age=None) -> np.ndarray:
        """
        Sum population per area over ages in [min_age, max_age] (both inclusive, max_age=None is unbounded).

        Returns:

            np.ndarray: int64 sums aligned with ``ids``.
        """

        mask = self._age >= min_age
        if max_age is not None:
            mask &= self._age <= max_age

        sums = np.zeros(len(self._ids), dtype=np.int64)
        np.add.at(sums, self._area[mask], self._count[mask])

        return sums

    def total(self) -> np.ndarray:
        return self.sum_ages(0, None)
