"""
Receptivity: the share of an area's population at or above an age cutoff.

Functions:

    receptivity(population, age_cutoff: int, diagnostics: Diagnostics = None, verbose: bool = False) -> dict:

        Compute a ReceptivityScore per area.

    rank(scores, key: str = "percentage") -> list:

        Order scores from most to least at risk.
"""

from collections import namedtuple
from collections.abc import Mapping

import click

from priority_index.errors import Diagnostics
from priority_index.parameters import check_age
from priority_index.population import PopulationTable

ReceptivityScore = namedtuple("ReceptivityScore", ["area_id", "receptive_population", "total_population", "percentage"])


def receptivity(population, age_cutoff, diagnostics=None, verbose=False):
    """
    Compute the percentage of each area's population aged ``age_cutoff`` or older.

    Parameters:

        population (PopulationTable or iterable of AgePopulationRecord): Per-age counts. Raw records are screened first,
            malformed rows are dropped and counted.
        age_cutoff (int): Youngest age counted as receptive.
        diagnostics (Diagnostics, optional): Receives ``zero_population_areas`` (and screening counts for raw records).
        verbose (bool): If True, report how many areas were scored.

    Returns:

        dict: area_id -> ReceptivityScore. ``percentage`` is None for an area whose total population is zero.

    Raises:

        ConfigurationError: If ``age_cutoff`` is not a non-negative integer.
    """

    check_age("age_cutoff", age_cutoff)

    if diagnostics is None:
        diagnostics = Diagnostics()

    if not isinstance(population, PopulationTable):
        population = PopulationTable(population, diagnostics=diagnostics)

    receptive = population.sum_ages(age_cutoff, None)
    totals = population.total()

    scores = {}
    for area_id, older, total in zip(population.ids, receptive.tolist(), totals.tolist()):
        if total == 0:
            diagnostics.zero_population_areas += 1
            percentage = None
        else:
            percentage = older / total * 100
        scores[area_id] = ReceptivityScore(area_id, older, total, percentage)

    if verbose:
        click.echo(f"Receptivity (age >= {age_cutoff}): {len(scores):,} areas, {diagnostics.zero_population_areas:,} with zero population")

    return scores


def rank(scores, key="percentage"):
    """
    Sort scores descending by ``key``, undefined (None) values last, ties broken by area identifier.

    Parameters:

        scores (Mapping or iterable of namedtuples): e.g. the output of ``receptivity()`` or ``compose()``.
        key (str): Field to rank by, "percentage" for receptivity or "composite" for index scores.

    Returns:

        list: The scores, most at risk first.
    """

    if isinstance(scores, Mapping):
        scores = scores.values()

    def order(score):
        value = getattr(score, key)
        return (value is None, 0 if value is None else -value, score.area_id)

    return sorted(scores, key=order)
