"""
This module defines the geographic subdivisions ("areas") scored by the priority index.

Classes:

    Area: identifier, display name, centroid latitude/longitude, and an optional boundary geometry.

    AreaRegistry: an ordered, read-only collection of areas with unique identifiers.

Functions:

    grid(M: int, N: int, node_size_km: float, origin_x: float, origin_y: float) -> AreaRegistry:

        Create an MxN grid of square areas, useful for synthetic scenarios.
"""

import math
from collections import namedtuple

import numpy as np
from shapely.geometry import Polygon

Area = namedtuple("Area", ["area_id", "name", "lat", "lon", "boundary"], defaults=(None,))
Area.__doc__ = """An area with a centroid in decimal degrees. ``boundary`` is opaque here and only passed through for rendering."""


class AreaRegistry:
    """Holds each area's identifier, display name, and centroid, in insertion order."""

    def __init__(self, areas):
        """
        Initialize an AreaRegistry.

        Parameters:

            areas (iterable of Area): The areas to register.

        Raises:

            ValueError: If an identifier appears more than once or a centroid is not a valid latitude/longitude pair.
        """

        self._areas = []
        self._index = {}
        for area in areas:
            area = Area(*area)
            if area.area_id in self._index:
                raise ValueError(f"Duplicate area identifier '{area.area_id}'.")
            if not _valid_centroid(area.lat, area.lon):
                raise ValueError(f"Area '{area.area_id}' has an invalid centroid ({area.lat=}, {area.lon=}).")
            self._index[area.area_id] = len(self._areas)
            self._areas.append(area)

        self._lats = np.array([area.lat for area in self._areas], dtype=np.float64)
        self._lons = np.array([area.lon for area in self._areas], dtype=np.float64)

        return

    @property
    def ids(self) -> list:
        return [area.area_id for area in self._areas]

    @property
    def latitudes(self) -> np.ndarray:
        return self._lats

    @property
    def longitudes(self) -> np.ndarray:
        return self._lons

    def index(self, area_id) -> int:
        """Return the position of ``area_id`` in the registry (KeyError if unknown)."""
        return self._index[area_id]

    def get(self, area_id, default=None):
        i = self._index.get(area_id)
        return default if i is None else self._areas[i]

    def subset(self, area_ids):
        """
        Build a registry restricted to ``area_ids``, in the order given.

        Returns:

            tuple: (AreaRegistry, list of identifiers that were not found)
        """

        found = []
        unknown = []
        for area_id in area_ids:
            if area_id in self._index:
                found.append(self._areas[self._index[area_id]])
            else:
                unknown.append(area_id)

        return AreaRegistry(found), unknown

    def __len__(self):
        return len(self._areas)

    def __iter__(self):
        return iter(self._areas)

    def __contains__(self, area_id):
        return area_id in self._index

    def __getitem__(self, area_id):
        return self._areas[self._index[area_id]]

    def __repr__(self) -> str:
        return f"AreaRegistry({len(self)} areas)"

    @classmethod
    def from_geodataframe(cls, gdf, id_column, name_column=None, lat_column=None, lon_column=None):
        """
        Build a registry from an in-memory GeoDataFrame.

        Parameters:

            gdf (geopandas.GeoDataFrame): One row per area; the active geometry is kept as the area boundary.
            id_column (str): Column holding the unique area identifier.
            name_column (str, optional): Column holding the display name. Defaults to the identifier.
            lat_column, lon_column (str, optional): Columns holding the centroid. If omitted the centroid of each
                geometry is used, so the frame is expected to be in a geographic CRS (EPSG:4326).

        Returns:

            AreaRegistry
        """

        if (lat_column is None) != (lon_column is None):
            raise ValueError("lat_column and lon_column must be given together.")

        areas = []
        for _, row in gdf.iterrows():
            geometry = row[gdf.geometry.name]
            if lat_column is None:
                centroid = geometry.centroid
                lat, lon = centroid.y, centroid.x
            else:
                lat, lon = row[lat_column], row[lon_column]
            name = row[name_column] if name_column is not None else row[id_column]
            areas.append(Area(row[id_column], name, float(lat), float(lon), geometry))

        return cls(areas)


def _valid_centroid(lat, lon) -> bool:
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False

    return math.isfinite(lat) and math.isfinite(lon) and (-90 <= lat <= 90) and (-180 <= lon <= 180)


def grid(M=5, N=5, node_size_km=10, origin_x=0, origin_y=0):
    """
    Create an MxN grid of square areas anchored at (origin_y, origin_x).

    Args:
        M (int): Number of rows (north-south).
        N (int): Number of columns (east-west).
        node_size_km (float): Size of each cell in kilometers (default 10).
        origin_x (float): longitude of the origin in decimal degrees (bottom-left corner) -180 <= origin_x < 180.
        origin_y (float): latitude of the origin in decimal degrees (bottom-left corner) -90 <= origin_y < 90.

    Returns:
        AreaRegistry: Areas with identifiers "0" … str(M*N-1) numbered row by row, centroids at the cell centers,
        and the cell polygons as boundaries.
    """

    if M < 1:
        raise ValueError("M must be >= 1")
    if N < 1:
        raise ValueError("N must be >= 1")
    if node_size_km <= 0:
        raise ValueError("node_size_km must be > 0")
    if not (-180 <= origin_x < 180):
        raise ValueError("origin_x must be -180 <= origin_x < 180")
    if not (-90 <= origin_y < 90):
        raise ValueError("origin_y must be -90 <= origin_y < 90")

    # approximate, ignores latitude
    km_per_degree = 111.320
    node_size_deg = node_size_km / km_per_degree

    if origin_y + M * node_size_deg > 90:
        raise ValueError(f"grid extends past latitude 90 (origin_y={origin_y}, M={M}, node_size_km={node_size_km})")
    if origin_x + N * node_size_deg > 180:
        raise ValueError(f"grid extends past longitude 180 (origin_x={origin_x}, N={N}, node_size_km={node_size_km})")

    areas = []
    for row in range(M):
        for col in range(N):
            x0 = origin_x + col * node_size_deg
            y0 = origin_y + row * node_size_deg
            x1 = x0 + node_size_deg
            y1 = y0 + node_size_deg
            poly = Polygon([(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)])
            areas.append(Area(str(row * N + col), f"cell {row},{col}", (y0 + y1) / 2, (x0 + x1) / 2, poly))

    return AreaRegistry(areas)
