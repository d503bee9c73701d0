"""Combine receptivity and vulnerability into the composite priority index."""

from collections import namedtuple

import click
import geopandas as gpd

from priority_index.errors import Diagnostics

IndexScore = namedtuple("IndexScore", ["area_id", "receptivity", "vulnerability", "composite", "age_cutoff"])


def compose(receptivity, vulnerability, age_cutoff, diagnostics=None, verbose=False):
    """
    Inner-join receptivity and vulnerability scores on area identifier and multiply them.

    Parameters:

        receptivity (dict): area_id -> ReceptivityScore.
        vulnerability (dict): area_id -> VulnerabilityScore.
        age_cutoff (int): The cutoff the receptivity scores were computed with, recorded on each result.
        diagnostics (Diagnostics, optional): Receives ``missing_vulnerability`` and ``missing_receptivity``.
        verbose (bool): If True, report the join counts.

    Returns:

        list of IndexScore: In receptivity order. ``composite`` is None when the receptivity percentage is undefined.
    """

    if diagnostics is None:
        diagnostics = Diagnostics()

    scores = []
    for area_id, received in receptivity.items():
        exposed = vulnerability.get(area_id)
        if exposed is None:
            diagnostics.missing_vulnerability += 1
            continue
        composite = None if received.percentage is None else received.percentage * exposed.score
        scores.append(IndexScore(area_id, received.percentage, exposed.score, composite, age_cutoff))

    missing_receptivity = sum(1 for area_id in vulnerability if area_id not in receptivity)
    diagnostics.missing_receptivity += missing_receptivity

    if verbose:
        click.echo(
            f"Composite index: {len(scores):,} areas joined, "
            f"{len(receptivity) - len(scores):,} without vulnerability, {missing_receptivity:,} without receptivity"
        )

    return scores


def to_geodataframe(registry, scores):
    """
    Join index scores back onto the areas for an external renderer.

    Every registered area appears once; areas without a score carry None in the score columns.

    Returns:

        geopandas.GeoDataFrame: Columns area_id, name, lat, lon, receptivity, vulnerability, composite, geometry (EPSG:4326).
    """

    by_id = {score.area_id: score for score in scores}
    rows = []
    for area in registry:
        score = by_id.get(area.area_id)
        rows.append(
            {
                "area_id": area.area_id,
                "name": area.name,
                "lat": area.lat,
                "lon": area.lon,
                "receptivity": None if score is None else score.receptivity,
                "vulnerability": None if score is None else score.vulnerability,
                "composite": None if score is None else score.composite,
                "geometry": area.boundary,
            }
        )

    columns = ["area_id", "name", "lat", "lon", "receptivity", "vulnerability", "composite", "geometry"]
    return gpd.GeoDataFrame(rows, columns=columns, geometry="geometry", crs="EPSG:4326")
