from .reprojecao import Zona, parse_zone, reproject_point, reproject_geometry, reproject_collection, close_rings
from .filtro import apply as apply_filter, search
from .resumo import Resumo, summarize
from .area import area_m2

__all__ = [
    "Zona",
    "parse_zone",
    "reproject_point",
    "reproject_geometry",
    "reproject_collection",
    "close_rings",
    "apply_filter",
    "search",
    "Resumo",
    "summarize",
    "area_m2",
]
