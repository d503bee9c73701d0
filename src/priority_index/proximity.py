r"""
This module computes great-circle distances between population centers and areas.

Functions:

    distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:

        Calculate the great-circle distance, in meters, between two points on the Earth's surface using the Haversine formula.

    proximity_matrix(areas, centers, chunk_size: int = None, verbose: bool = False) -> ProximityMatrix:

        Compute the distance from every center to every area, in parallel.

Both use the same formula on a sphere of radius ``EARTH_RADIUS_M``:

.. math::
    d = 2 R \arcsin \sqrt{\sin^2(\Delta\phi / 2) + \cos\phi_1 \cos\phi_2 \sin^2(\Delta\lambda / 2)}
"""

import math
from numbers import Number

import click
import numba as nb
import numpy as np

from priority_index.areas import AreaRegistry

EARTH_RADIUS_M = 6_371_000.0  # mean Earth radius in meters


def distance(lat1, lon1, lat2, lon2):
    """
    Calculate the great-circle distance between two points on the Earth's surface.
    This function uses the Haversine formula to compute the distance between two points
    specified by their latitude and longitude in decimal degrees.

    If all arguments are scalars, will return a single scalar distance, (lat1, lon1) to (lat2, lon2).

    If lat2, lon2 are vectors, will return a vector of distances, (lat1, lon1) to each lat/lon in lat2, lon2.

    If lat1, lon1 and lat2, lon2 are vectors, will return a matrix with shape (N, M) of distances where N is the length of lat1/lon1 and M is the length of lat2/lon2.

    Parameters:

        lat1 (float): Latitude of the first point(s) in decimal degrees [-90, 90].
        lon1 (float): Longitude of the first point(s) in decimal degrees [-180, 180].
        lat2 (float): Latitude of the second point(s) in decimal degrees [-90, 90].
        lon2 (float): Longitude of the second point(s) in decimal degrees [-180, 180].

    Returns:

        float: The distance between the two points in meters.
    """

    # Sanity checks
    _is_instance(lat1, (Number, np.ndarray), "lat1 must be a numeric value or NumPy array")
    _is_instance(lon1, (Number, np.ndarray), "lon1 must be a numeric value or NumPy array")
    _is_instance(lat2, (Number, np.ndarray), "lat2 must be a numeric value or NumPy array")
    _is_instance(lon2, (Number, np.ndarray), "lon2 must be a numeric value or NumPy array")
    _has_values((-90 <= lat1) & (lat1 <= 90), "lat1 must be in the range [-90, 90]")
    _has_values((-180 <= lon1) & (lon1 <= 180), "lon1 must be in the range [-180, 180]")
    _has_values((-90 <= lat2) & (lat2 <= 90), "lat2 must be in the range [-90, 90]")
    _has_values((-180 <= lon2) & (lon2 <= 180), "lon2 must be in the range [-180, 180]")

    lat1 = np.radians(np.array(lat1, dtype=np.float64).flatten())
    lon1 = np.radians(np.array(lon1, dtype=np.float64).flatten())
    lat2 = np.radians(np.array(lat2, dtype=np.float64).flatten())
    lon2 = np.radians(np.array(lon2, dtype=np.float64).flatten())

    _has_shape(lon1, lat1.shape, f"lat1 and lon1 must have the same shape ({lat1.shape=}, {lon1.shape=})")
    _has_shape(lon2, lat2.shape, f"lat2 and lon2 must have the same shape ({lat2.shape=}, {lon2.shape=})")

    dlat = lat2[np.newaxis, :] - lat1[:, np.newaxis]
    dlon = lon2[np.newaxis, :] - lon1[:, np.newaxis]
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1)[:, np.newaxis] * np.cos(lat2)[np.newaxis, :] * np.sin(dlon / 2) ** 2
    d = 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.minimum(a, 1.0)))

    if d.size == 1:
        return d[0, 0]  # return a scalar
    elif np.any(np.array(d.shape) == 1):
        return d.reshape((d.size,))  # return a vector (1-D)

    return d  # return NxM matrix (len(lat1/lon1) x len(lat2/lon2))


@nb.njit(
    (nb.float64[:], nb.float64[:], nb.float64[:], nb.float64[:], nb.float64[:, :]),
    parallel=True,
    nogil=True,
    cache=True,
)
def _haversine_kernel(center_lats, center_lons, area_lats, area_lons, out):  # pragma: no cover
    # inputs in radians, one row of out per center
    for i in nb.prange(center_lats.shape[0]):
        cos_i = math.cos(center_lats[i])
        for j in range(area_lats.shape[0]):
            sin_dlat = math.sin((area_lats[j] - center_lats[i]) / 2)
            sin_dlon = math.sin((area_lons[j] - center_lons[i]) / 2)
            a = sin_dlat**2 + cos_i * math.cos(area_lats[j]) * sin_dlon**2
            out[i, j] = 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(a, 1.0)))

    return


class ProximityMatrix:
    """Distances in meters from each population center (rows) to each area (columns)."""

    def __init__(self, center_ids, area_ids, distances):
        _is_instance(distances, np.ndarray, f"distances must be a NumPy array ({type(distances)=})")
        _has_shape(
            distances,
            (len(center_ids), len(area_ids)),
            f"distances must have shape (centers, areas) ({distances.shape=}, {len(center_ids)=}, {len(area_ids)=})",
        )

        self._center_ids = list(center_ids)
        self._area_ids = list(area_ids)
        self._distances = distances.view()
        self._distances.flags.writeable = False
        self._center_index = {center_id: i for i, center_id in enumerate(self._center_ids)}
        self._area_index = {area_id: j for j, area_id in enumerate(self._area_ids)}

        return

    @property
    def center_ids(self) -> list:
        return list(self._center_ids)

    @property
    def area_ids(self) -> list:
        return list(self._area_ids)

    @property
    def distances(self) -> np.ndarray:
        return self._distances

    @property
    def shape(self):
        return self._distances.shape

    def column(self, area_id) -> np.ndarray:
        """Distances from every center to ``area_id``."""
        return self._distances[:, self._area_index[area_id]]

    def __getitem__(self, key):
        center_id, area_id = key
        return self._distances[self._center_index[center_id], self._area_index[area_id]]

    def __repr__(self) -> str:
        return f"ProximityMatrix({len(self._center_ids)} centers x {len(self._area_ids)} areas)"


def proximity_matrix(areas, centers, chunk_size=None, verbose=False):
    """
    Compute the haversine distance from every center to every area.

    Rows are computed in parallel with Numba. With ``chunk_size`` the centers are split into blocks of at most
    that many rows, each block is computed independently and the blocks are stacked.

    No self-exclusion is applied: a center that is also one of the areas has distance 0 to itself.

    Parameters:

        areas (AreaRegistry or iterable of Area): All areas to be scored.
        centers (AreaRegistry or iterable of Area): The population centers.
        chunk_size (int, optional): Maximum number of centers per block.
        verbose (bool): If True, report the matrix shape and block count.

    Returns:

        ProximityMatrix
    """

    if not isinstance(areas, AreaRegistry):
        areas = AreaRegistry(areas)
    if not isinstance(centers, AreaRegistry):
        centers = AreaRegistry(centers)

    if chunk_size is not None:
        _has_values(chunk_size > 0, f"chunk_size must be positive ({chunk_size=})")

    area_lats = np.ascontiguousarray(np.radians(areas.latitudes))
    area_lons = np.ascontiguousarray(np.radians(areas.longitudes))
    center_lats = np.ascontiguousarray(np.radians(centers.latitudes))
    center_lons = np.ascontiguousarray(np.radians(centers.longitudes))

    ncenters = len(centers)
    step = ncenters if not chunk_size else chunk_size
    blocks = []
    for start in range(0, ncenters, max(step, 1)):
        stop = min(start + step, ncenters)
        block = np.empty((stop - start, len(areas)), dtype=np.float64)
        _haversine_kernel(center_lats[start:stop], center_lons[start:stop], area_lats, area_lons, block)
        blocks.append(block)

    distances = np.vstack(blocks) if blocks else np.empty((0, len(areas)), dtype=np.float64)

    if verbose:
        click.echo(f"Proximity matrix: {ncenters:,} centers x {len(areas):,} areas in {len(blocks)} block(s)")

    return ProximityMatrix(centers.ids, areas.ids, distances)


# Sanity checks


def _is_instance(obj, types, message):
    if not isinstance(obj, types):
        raise TypeError(message)

    return


def _has_values(check, message):
    if not np.all(check):
        raise ValueError(message)

    return


def _has_shape(obj, shape, message):
    if not obj.shape == shape:
        raise TypeError(message)

    return
