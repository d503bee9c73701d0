"""
Run the full priority index pipeline.

    population rows ──► screen ──► receptivity ───────────────────────────┐
                          │                                               ├──► compose ──► IndexScore list
                          └──► population centers ──► proximity ──► vulnerability

Each run is a pure function of the area registry, the population rows and the parameters.
"""

from collections import namedtuple

import click

from priority_index.composer import compose
from priority_index.errors import Diagnostics
from priority_index.parameters import with_defaults
from priority_index.population import PopulationTable
from priority_index.proximity import proximity_matrix
from priority_index.receptivity import receptivity
from priority_index.vulnerability import population_centers
from priority_index.vulnerability import vulnerability

PipelineResult = namedtuple(
    "PipelineResult", ["scores", "receptivity", "vulnerability", "centers", "proximity", "diagnostics", "parameters"]
)


def run(registry, records, params=None, verbose=False):
    """
    Compute the composite index for every area with population data.

    Parameters:

        registry (AreaRegistry): The areas and their centroids.
        records (iterable of AgePopulationRecord): One row per (area, age). Malformed rows and rows for unregistered
            areas are dropped and counted in the returned diagnostics.
        params (Parameters or dict, optional): Overrides for ``DEFAULTS``; unknown keys are a ConfigurationError.
        verbose (bool): If True, report progress for each stage.

    Returns:

        PipelineResult

    Raises:

        ConfigurationError: If the parameters are invalid. Nothing is computed in that case.
    """

    params = with_defaults(params).validate()
    diagnostics = Diagnostics()

    if verbose:
        click.echo(f"Scoring {len(registry):,} areas with parameters:\n{params}")

    table = PopulationTable(records, registry=registry, diagnostics=diagnostics, verbose=verbose)
    received = receptivity(table, params.age_cutoff, diagnostics=diagnostics, verbose=verbose)
    centers = population_centers(
        registry,
        table,
        params.min_mobile_age,
        params.max_mobile_age,
        params.min_center_population,
        diagnostics=diagnostics,
        verbose=verbose,
    )
    proximity = proximity_matrix(registry, centers, chunk_size=params.chunk_size, verbose=verbose)
    exposed = vulnerability(proximity, params.radius_meters, count_self_as_neighbor=params.count_self_as_neighbor, verbose=verbose)
    scores = compose(received, exposed, params.age_cutoff, diagnostics=diagnostics, verbose=verbose)

    return PipelineResult(scores, received, exposed, centers, proximity, diagnostics, params)


def sweep(registry, records, params=None, age_cutoffs=(60, 70, 80), verbose=False):
    """
    Run the pipeline once per age cutoff, all other parameters unchanged.

    Returns:

        dict: age_cutoff -> PipelineResult
    """

    records = list(records)
    base = with_defaults(params)
    results = {}
    for age_cutoff in age_cutoffs:
        results[age_cutoff] = run(registry, records, base << {"age_cutoff": age_cutoff}, verbose=verbose)

    return results
