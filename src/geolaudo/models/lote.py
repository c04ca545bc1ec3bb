from __future__ import annotations

import copy
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from numbers import Real
from types import MappingProxyType

from geolaudo import config
from geolaudo.errors import ParseError
from geolaudo.models.risco import GrauRisco

logger = logging.getLogger(__name__)

# número decimal simples, com expoente opcional
_NUMERO_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass(frozen=True, eq=False)
class Lote:
    """
    Representa um lote (feição GeoJSON) já normalizado.

    As regras de valor padrão das propriedades são aplicadas uma única vez,
    em :meth:`from_feature`; o restante do pacote trabalha apenas com os
    campos tipados abaixo. A identidade de um lote é a do objeto: os
    identificadores da fonte não são garantidamente únicos.

    >>> lote = Lote.from_feature({
    ...     "type": "Feature",
    ...     "geometry": None,
    ...     "properties": {"GRAU_RISCO": 3, "CUSTO": "1500.5", "LOTE_APP": "sim"},
    ... })
    >>> lote.grau, lote.nucleo, lote.custo, lote.em_app, lote.rotulo
    (<GrauRisco.ALTO: '3'>, 'N/A', 1500.5, True, None)
    >>> lote.nao_conforme
    True
    """

    geometry: Mapping | None
    properties: Mapping = field(default_factory=lambda: MappingProxyType({}))
    grau: GrauRisco = GrauRisco.NA
    nucleo: str = config.NUCLEO_AUSENTE
    custo: float | None = None
    em_app: bool = False
    rotulo: str | None = None

    def __str__(self):
        return f"Lote(rotulo={self.rotulo!r}, nucleo={self.nucleo!r}, grau={self.grau.value})"

    @property
    def tipo(self) -> str | None:
        """Tipo da geometria (``Point``, ``Polygon``, ``MultiPolygon``...)."""
        if not self.geometry:
            return None
        return self.geometry.get("type")

    @property
    def tem_custo(self) -> bool:
        return self.custo is not None

    @property
    def nao_conforme(self) -> bool:
        """Grau numérico maior que 1, ou lote em APP."""
        nivel = self.grau.nivel
        return (nivel is not None and nivel > 1) or self.em_app

    @classmethod
    def from_feature(cls, feature: Mapping) -> "Lote":
        if not isinstance(feature, Mapping):
            raise ParseError(
                f"Feição inválida: esperado objeto, obtido {type(feature).__name__}."
            )

        props = feature.get("properties") or {}
        if not isinstance(props, Mapping):
            raise ParseError("Feição inválida: 'properties' não é um objeto.")

        geometry = feature.get("geometry")
        if geometry is not None and not isinstance(geometry, Mapping):
            raise ParseError("Feição inválida: 'geometry' não é um objeto.")

        return cls(
            geometry=copy.deepcopy(geometry),
            properties=MappingProxyType(dict(props)),
            grau=GrauRisco.from_property(props.get(config.PROP_GRAU)),
            nucleo=_parse_nucleo(props.get(config.PROP_NUCLEO)),
            custo=_parse_custo(props.get(config.PROP_CUSTO)),
            em_app=_parse_app(props.get(config.PROP_APP)),
            rotulo=_parse_rotulo(props),
        )

    def to_feature(self) -> dict:
        """Devolve a feição como um dicionário GeoJSON simples."""
        return {
            "type": "Feature",
            "geometry": copy.deepcopy(self.geometry),
            "properties": dict(self.properties),
        }


def _parse_nucleo(value) -> str:
    if value is None or value == "":
        return config.NUCLEO_AUSENTE
    return str(value)


def _parse_custo(value) -> float | None:
    """
    Custo numérico válido, ou ``None`` quando não há dado de custo.

    >>> _parse_custo(100), _parse_custo(" 250.75 "), _parse_custo("abc"), _parse_custo(None)
    (100.0, 250.75, None, None)
    >>> _parse_custo("1_000"), _parse_custo(10 ** 400)
    (None, None)
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Real):
        try:
            custo = float(value)
        except OverflowError:
            logger.debug("Custo fora da faixa de ponto flutuante ignorado.")
            return None
    elif isinstance(value, str):
        texto = value.strip()
        if not _NUMERO_RE.match(texto):
            logger.debug("Custo não numérico %r ignorado.", value)
            return None
        custo = float(texto)
    else:
        return None

    if not math.isfinite(custo):
        return None
    return custo


def _parse_app(value) -> bool:
    return isinstance(value, str) and value.casefold() == config.VALOR_APP.casefold()


def _parse_rotulo(props: Mapping) -> str | None:
    for chave in config.PROP_ROTULOS:
        value = props.get(chave)
        if value is not None and value != "":
            return str(value)
    return None
