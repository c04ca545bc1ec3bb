"""
Área geodésica de geometrias em coordenadas geográficas.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pyproj import Geod
from shapely.errors import GEOSException
from shapely.geometry import shape

from geolaudo import config

logger = logging.getLogger(__name__)

GEOD = Geod(ellps=config.ELIPSOIDE)

_POLIGONAIS = {"Polygon", "MultiPolygon", "GeometryCollection"}


def area_m2(geometry: Mapping | None) -> float | None:
    """
    Área geodésica em m² de uma geometria GeoJSON em (lon, lat).

    Geometrias não poligonais têm área zero. Geometrias que o shapely não
    consegue construir devolvem ``None``.

    >>> area_m2({"type": "Point", "coordinates": [-46.6, -23.5]})
    0.0
    >>> a = area_m2({"type": "Polygon", "coordinates": [[
    ...     [-46.0, -23.0], [-45.99, -23.0], [-45.99, -23.01], [-46.0, -23.01], [-46.0, -23.0]]]})
    >>> 1_000_000 < a < 1_200_000
    True
    """
    if not geometry or geometry.get("type") not in _POLIGONAIS:
        return 0.0

    try:
        geom = shape(geometry)
    except (GEOSException, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        logger.warning("Não foi possível construir a geometria para cálculo de área: %s", e)
        return None

    if geom.is_empty:
        return 0.0

    area, _ = GEOD.geometry_area_perimeter(geom)
    return abs(area)
