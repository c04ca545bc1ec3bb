"""
Reprojeção UTM → coordenadas geodésicas (longitude, latitude).

Este módulo contém apenas a lógica de conversão de coordenadas. Não conhece
Lote, filtros ou resumos: recebe estruturas GeoJSON e devolve estruturas
GeoJSON novas, sem alterar a entrada.

Uso típico:
    from geolaudo.compute import reproject_point, reproject_collection

>>> zona = parse_zone("23s")
>>> zona
Zona(numero=23, sul=True)
>>> lon, lat = reproject_point(333287.1236, 7394586.0946, zona)
>>> round(lon, 5), round(lat, 5)
(-46.63331, -23.55052)
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from numbers import Real

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from geolaudo import config
from geolaudo.errors import ConfigurationError, ParseError

logger = logging.getLogger(__name__)

_ZONA_RE = re.compile(r"^\s*(\d{1,2})\s*([A-Za-z]?)\s*$")

_TIPOS_ANEIS = {"Polygon": 1, "MultiPolygon": 2}


@dataclass(frozen=True)
class Zona:
    """
    Zona UTM: número (1..60) e hemisfério.

    >>> Zona(23, sul=True).proj4
    '+proj=utm +zone=23 +south +ellps=GRS80 +units=m +no_defs'
    """

    numero: int
    sul: bool = False

    @property
    def proj4(self) -> str:
        sul = "+south " if self.sul else ""
        return f"+proj=utm +zone={self.numero} {sul}+ellps={config.ELIPSOIDE} +units=m +no_defs"

    def __str__(self):
        return f"{self.numero}{'s' if self.sul else 'n'}"


def is_geodetic_selector(zona) -> bool:
    """
    Indica se o seletor de projeção significa "já geodésico".

    >>> is_geodetic_selector("WGS84"), is_geodetic_selector("23s")
    (True, False)
    """
    if zona is None:
        return True
    return isinstance(zona, str) and zona.strip().lower() in config.SELETORES_GEODESICOS


def parse_zone(zona) -> Zona:
    """
    Converte um identificador de zona (``"23s"``, ``"22n"``, ``23``) em :class:`Zona`.

    Sufixo ``s``/``S`` indica hemisfério sul; qualquer outro sufixo (ou
    nenhum) é tratado como hemisfério norte.

    >>> parse_zone("22N")
    Zona(numero=22, sul=False)
    >>> parse_zone("abc")
    Traceback (most recent call last):
    ...
    geolaudo.errors.ConfigurationError: Zona UTM inválida: 'abc'.
    """
    if isinstance(zona, Zona):
        return zona

    if isinstance(zona, bool) or not isinstance(zona, (int, str)):
        raise ConfigurationError(f"Zona UTM inválida: {zona!r}.")

    match = _ZONA_RE.match(str(zona))
    if not match:
        raise ConfigurationError(f"Zona UTM inválida: {zona!r}.")

    numero = int(match.group(1))
    if not 1 <= numero <= 60:
        raise ConfigurationError(f"Zona UTM fora da faixa 1..60: {zona!r}.")

    return Zona(numero=numero, sul=match.group(2).lower() == "s")


@lru_cache(maxsize=None)
def _transformer(zona: Zona) -> Transformer:
    destino = CRS.from_proj4(f"+proj=longlat +ellps={config.ELIPSOIDE} +no_defs")
    return Transformer.from_crs(CRS.from_proj4(zona.proj4), destino, always_xy=True)


def reproject_point(easting: float, northing: float, zona) -> tuple[float, float]:
    """
    Converte um par (easting, northing) da zona UTM em (longitude, latitude).

    Parameters
    ----------
    easting, northing : float
        Coordenadas planas em metros.

    zona : Zona | str | int
        Zona UTM. Identificadores inválidos geram :class:`ConfigurationError`.

    Returns
    -------
    tuple[float, float]
        (longitude, latitude) em graus decimais sobre o GRS80.
    """
    lon, lat = _transformer(parse_zone(zona)).transform(easting, northing)
    return float(lon), float(lat)


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(node) -> bool:
    return isinstance(node, (list, tuple))


def _is_coordinate_pair(node) -> bool:
    return _is_sequence(node) and len(node) >= 2 and _is_number(node[0]) and _is_number(node[1])


def reproject_geometry(coords, zona):
    """
    Percorre recursivamente uma árvore de coordenadas e reprojeta cada par.

    Um par de coordenadas é uma sequência de dois ou mais números; qualquer
    outra sequência é tratada como lista de subárvores. Folhas que não formam
    um par (ex.: ``[5]``) são devolvidas sem alteração. A forma da estrutura
    é preservada, apenas os números das folhas mudam. Ordenadas extras (Z, M)
    são mantidas.

    >>> tree = reproject_geometry([[[333287.1236, 7394586.0946, 12.5]]], "23s")
    >>> [[[round(v, 5) for v in par] for par in anel] for anel in tree]
    [[[-46.63331, -23.55052, 12.5]]]
    """
    zona = parse_zone(zona)
    return _walk(coords, zona)


def _walk(node, zona: Zona):
    if _is_coordinate_pair(node):
        lon, lat = reproject_point(node[0], node[1], zona)
        return [lon, lat, *node[2:]]

    if not _is_sequence(node):
        return node

    if node and _is_number(node[0]):
        # folha numérica que não é um par de coordenadas
        return list(node)

    return [_walk(child, zona) for child in node]


def close_rings(geometry: Mapping | None) -> Mapping | None:
    """
    Fecha os anéis de Polygon/MultiPolygon (primeiro vértice igual ao último).

    Devolve uma geometria nova; outros tipos são devolvidos sem alteração.

    >>> g = close_rings({"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1]]]})
    >>> g["coordinates"][0][-1]
    [0, 0]
    """
    if not geometry:
        return geometry

    profundidade = _TIPOS_ANEIS.get(geometry.get("type"))
    if profundidade is None:
        return geometry

    result = dict(geometry)
    result["coordinates"] = _close_at(geometry.get("coordinates"), profundidade)
    return result


def _close_at(node, profundidade: int):
    if not _is_sequence(node):
        return node
    if profundidade == 0:
        anel = [list(p) if _is_sequence(p) else p for p in node]
        if anel and _is_sequence(anel[0]) and anel[0][:2] != anel[-1][:2]:
            anel.append(list(anel[0]))
        return anel
    return [_close_at(child, profundidade - 1) for child in node]


def declares_geodetic(document: Mapping) -> bool:
    """
    Verifica se o membro ``crs`` do documento declara um CRS geográfico.

    >>> declares_geodetic({"crs": {"type": "name",
    ...     "properties": {"name": "urn:ogc:def:crs:OGC:1.3:CRS84"}}})
    True
    >>> declares_geodetic({"type": "FeatureCollection", "features": []})
    False
    """
    crs = document.get("crs")
    if not isinstance(crs, Mapping):
        return False

    props = crs.get("properties")
    if not isinstance(props, Mapping):
        return False

    nome = props.get("name")
    if not isinstance(nome, str) or not nome:
        return False

    try:
        return CRS.from_user_input(nome).is_geographic
    except CRSError:
        logger.warning("CRS declarado não reconhecido: %r", nome)
        return False


def _reproject_geometry_object(geometry, zona: Zona, fechar_aneis: bool):
    if geometry is None:
        return None

    if not isinstance(geometry, Mapping):
        raise ParseError(f"Geometria inválida: {type(geometry).__name__}.")

    result = dict(geometry)
    if geometry.get("type") == "GeometryCollection":
        result["geometries"] = [
            _reproject_geometry_object(g, zona, fechar_aneis)
            for g in geometry.get("geometries") or []
        ]
        return result

    if "coordinates" in geometry:
        result["coordinates"] = _walk(geometry["coordinates"], zona)

    if fechar_aneis:
        result = close_rings(result)

    return result


def _reproject_feature(feature, zona: Zona, fechar_aneis: bool):
    if not isinstance(feature, Mapping):
        raise ParseError(f"Feição inválida: esperado objeto, obtido {type(feature).__name__}.")

    result = copy.deepcopy(dict(feature))
    result["geometry"] = _reproject_geometry_object(feature.get("geometry"), zona, fechar_aneis)
    return result


def reproject_collection(document: Mapping, zona, *, fechar_aneis: bool = False) -> dict:
    """
    Reprojeta um documento GeoJSON inteiro (FeatureCollection, Feature ou geometria).

    A zona é validada antes de qualquer conversão: um identificador inválido
    aborta a operação inteira com :class:`ConfigurationError`. Se o seletor
    for geodésico, ou se o próprio documento declarar um CRS geográfico,
    nenhuma conversão é aplicada e o documento é apenas copiado.

    Parameters
    ----------
    document : Mapping
        Documento GeoJSON já decodificado.

    zona : Zona | str | int | None
        Zona UTM de origem, ou seletor geodésico (``"geodetic"``/``None``).

    fechar_aneis : bool, default=False
        Fecha anéis de polígonos abertos após a conversão.

    Returns
    -------
    dict
        Documento novo com coordenadas em graus.
    """
    if not isinstance(document, Mapping):
        raise ParseError(f"Documento GeoJSON inválido: {type(document).__name__}.")

    if is_geodetic_selector(zona):
        logger.debug("Seletor geodésico: documento mantido sem reprojeção.")
        return copy.deepcopy(dict(document))

    zona = parse_zone(zona)

    if declares_geodetic(document):
        logger.info("Documento declara CRS geográfico; reprojeção ignorada.")
        return copy.deepcopy(dict(document))

    tipo = document.get("type")
    if tipo == "FeatureCollection" or "features" in document:
        features = document.get("features")
        if not isinstance(features, list):
            raise ParseError("Documento GeoJSON inválido: 'features' ausente ou não é uma lista.")
        result = copy.deepcopy({k: v for k, v in document.items() if k != "features"})
        result["features"] = [_reproject_feature(f, zona, fechar_aneis) for f in features]
    elif tipo == "Feature":
        result = _reproject_feature(document, zona, fechar_aneis)
    else:
        result = _reproject_geometry_object(document, zona, fechar_aneis)

    result.pop("crs", None)

    logger.info("Documento reprojetado da zona UTM %s para coordenadas geodésicas.", zona)
    return result

