"""
Vulnerability: exposure of each area to nearby population centers.

A population center is an area whose working-age ("mobile") population reaches a threshold. An area's
vulnerability is the square root of the number of centers closer than a radius.
"""

from collections import namedtuple

import click
import numpy as np

from priority_index.errors import Diagnostics
from priority_index.parameters import check_mobile_band
from priority_index.parameters import check_positive
from priority_index.population import PopulationTable

VulnerabilityScore = namedtuple("VulnerabilityScore", ["area_id", "neighbor_count", "score"])


def population_centers(registry, population, min_mobile_age, max_mobile_age, min_center_population, diagnostics=None, verbose=False):
    """
    Select the areas whose population aged within [min_mobile_age, max_mobile_age] is at least ``min_center_population``.

    Parameters:

        registry (AreaRegistry): Areas with centroids; qualifying areas missing from it are skipped and counted.
        population (PopulationTable or iterable of AgePopulationRecord): Per-age counts.
        min_mobile_age (int): Youngest mobile age (inclusive).
        max_mobile_age (int): Oldest mobile age (inclusive).
        min_center_population (Number): Threshold a center's mobile population must meet or exceed.
        diagnostics (Diagnostics, optional): Receives ``unknown_centers``.
        verbose (bool): If True, report the number of centers.

    Returns:

        AreaRegistry: The population centers, in population table order.

    Raises:

        ConfigurationError: If an age bound is not a non-negative integer, the age band is inverted, or the threshold is not a
            finite positive number.
    """

    check_mobile_band(min_mobile_age, max_mobile_age)
    check_positive("min_center_population", min_center_population)

    if diagnostics is None:
        diagnostics = Diagnostics()

    if not isinstance(population, PopulationTable):
        population = PopulationTable(population, diagnostics=diagnostics)

    mobile = population.sum_ages(min_mobile_age, max_mobile_age)
    qualifying = [area_id for area_id, count in zip(population.ids, mobile.tolist()) if count >= min_center_population]

    centers, unknown = registry.subset(qualifying)
    diagnostics.unknown_centers += len(unknown)

    if verbose:
        click.echo(
            f"Population centers (ages {min_mobile_age}-{max_mobile_age} >= {min_center_population:,}): "
            f"{len(centers):,} of {len(population):,} areas, {len(unknown):,} unknown"
        )

    return centers


def vulnerability(proximity, radius_meters, count_self_as_neighbor=True, verbose=False):
    """
    Score each area (matrix column) by the population centers strictly closer than ``radius_meters``.

    Parameters:

        proximity (ProximityMatrix): Center x area distances in meters.
        radius_meters (Number): Neighborhood radius; a center at exactly this distance does not count.
        count_self_as_neighbor (bool): If False, a center is never counted as its own neighbor.
        verbose (bool): If True, report how many areas have at least one neighbor.

    Returns:

        dict: area_id -> VulnerabilityScore with ``score = sqrt(neighbor_count)``.

    Raises:

        ConfigurationError: If ``radius_meters`` is not a finite positive number.
    """

    check_positive("radius_meters", radius_meters)

    within = proximity.distances < radius_meters

    area_ids = proximity.area_ids
    if not count_self_as_neighbor:
        columns = {area_id: j for j, area_id in enumerate(area_ids)}
        for i, center_id in enumerate(proximity.center_ids):
            j = columns.get(center_id)
            if j is not None:
                within[i, j] = False

    counts = within.sum(axis=0).astype(np.int64)
    scores = {area_id: VulnerabilityScore(area_id, count, float(np.sqrt(count))) for area_id, count in zip(area_ids, counts.tolist())}

    if verbose:
        exposed = int(np.count_nonzero(counts))
        click.echo(f"Vulnerability (radius {radius_meters:,} m): {exposed:,} of {len(scores):,} areas near a center")

    return scores
