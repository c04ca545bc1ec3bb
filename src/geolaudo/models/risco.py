"""
Graus de risco e o registro de graus habilitados.

>>> GrauRisco.from_property(2) is GrauRisco.from_property("2")
True
>>> GrauRisco.from_property(None)
<GrauRisco.NA: 'NA'>
"""

from __future__ import annotations

import logging
from enum import Enum
from numbers import Integral, Real

from geolaudo.errors import InvalidArgument

logger = logging.getLogger(__name__)


class GrauRisco(str, Enum):
    """
    Conjunto fechado de graus de risco: ``1``, ``2``, ``3``, ``4`` e ``NA``.

    O valor de cada membro é a forma canônica em texto do grau, de modo que
    o número ``2`` e o texto ``"2"`` correspondem ao mesmo grau.
    """

    BAIXO = "1"
    MEDIO = "2"
    ALTO = "3"
    MUITO_ALTO = "4"
    NA = "NA"

    @property
    def cor(self) -> str:
        return _CORES[self]

    @property
    def nome(self) -> str:
        return _NOMES[self]

    @property
    def nivel(self) -> int | None:
        """Nível numérico do grau, ou ``None`` para ``NA``."""
        return None if self is GrauRisco.NA else int(self.value)

    @staticmethod
    def canonical(value) -> str | None:
        """
        Forma canônica em texto de um valor de grau.

        >>> GrauRisco.canonical(3.0), GrauRisco.canonical(" 4 "), GrauRisco.canonical(True)
        ('3', '4', None)
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, Integral):
            try:
                return str(int(value))
            except ValueError:
                # inteiro longo demais para virar texto
                return None
        if isinstance(value, Real):
            try:
                inteiro = float(value).is_integer()
            except OverflowError:
                return None
            return str(int(value)) if inteiro else str(value)
        return str(value).strip()

    @classmethod
    def from_property(cls, value) -> "GrauRisco":
        """Lê o grau de uma propriedade; ausente ou desconhecido vira ``NA``."""
        chave = cls.canonical(value)
        try:
            return cls(chave)
        except ValueError:
            if chave not in (None, ""):
                logger.debug("Grau de risco não reconhecido %r tratado como NA.", value)
            return cls.NA

    @classmethod
    def from_key(cls, key) -> "GrauRisco":
        """
        Lê um grau informado explicitamente (ex.: pelo usuário).

        Diferente de :meth:`from_property`, chaves fora do conjunto fechado
        geram :class:`InvalidArgument`.

        >>> GrauRisco.from_key("na")
        <GrauRisco.NA: 'NA'>
        >>> GrauRisco.from_key(7)
        Traceback (most recent call last):
        ...
        geolaudo.errors.InvalidArgument: Grau de risco desconhecido: 7.
        """
        if isinstance(key, cls):
            return key
        chave = cls.canonical(key)
        if chave is not None and chave.upper() == cls.NA.value:
            return cls.NA
        try:
            return cls(chave)
        except ValueError:
            raise InvalidArgument(f"Grau de risco desconhecido: {key!r}.") from None


_CORES = {
    GrauRisco.BAIXO: "#2ecc71",
    GrauRisco.MEDIO: "#f1c40f",
    GrauRisco.ALTO: "#e67e22",
    GrauRisco.MUITO_ALTO: "#c0392b",
    GrauRisco.NA: "#3498db",
}

_NOMES = {
    GrauRisco.BAIXO: "Baixo",
    GrauRisco.MEDIO: "Médio",
    GrauRisco.ALTO: "Alto",
    GrauRisco.MUITO_ALTO: "Muito Alto",
    GrauRisco.NA: "Sem risco definido",
}


class RegistroGraus:
    """
    Registro de quais graus de risco estão habilitados para exibição.

    Todos os graus começam habilitados. O conjunto de chaves é fechado e
    nunca cresce a partir dos dados; apenas :meth:`set_enabled`,
    :meth:`toggle` e :meth:`enable_all` alteram o estado.

    >>> registro = RegistroGraus()
    >>> registro.set_enabled("3", False)
    >>> sorted(g.value for g in registro.enabled_grades())
    ['1', '2', '4', 'NA']
    """

    def __init__(self):
        self._habilitados = {grau: True for grau in GrauRisco}

    def __repr__(self):
        ativos = ", ".join(g.value for g in GrauRisco if self._habilitados[g])
        return f"RegistroGraus(habilitados=[{ativos}])"

    def set_enabled(self, grau, enabled: bool) -> None:
        self._habilitados[GrauRisco.from_key(grau)] = bool(enabled)

    def toggle(self, grau) -> bool:
        """Inverte o estado do grau e devolve o novo estado."""
        grau = GrauRisco.from_key(grau)
        self._habilitados[grau] = not self._habilitados[grau]
        return self._habilitados[grau]

    def is_enabled(self, grau) -> bool:
        return self._habilitados[GrauRisco.from_key(grau)]

    def enable_all(self) -> None:
        for grau in GrauRisco:
            self._habilitados[grau] = True

    def enabled_grades(self) -> frozenset[GrauRisco]:
        return frozenset(g for g, ativo in self._habilitados.items() if ativo)
