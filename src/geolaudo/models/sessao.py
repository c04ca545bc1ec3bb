from __future__ import annotations

import logging
from dataclasses import dataclass

from geolaudo import config
from geolaudo.compute.filtro import apply
from geolaudo.compute.reprojecao import is_geodetic_selector, parse_zone, reproject_collection
from geolaudo.compute.resumo import Resumo, summarize
from geolaudo.io.geolaudo_io import GeoLaudoIO
from .lotes import Lotes, LoteStore
from .risco import GrauRisco, RegistroGraus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Painel:
    """Resultado de um recálculo: lotes filtrados e o resumo deles."""

    lotes: Lotes
    resumo: Resumo


class Sessao:
    """
    Estado de uma sessão de análise: lotes carregados, graus habilitados e
    núcleo selecionado.

    Cada interação do usuário vira um comando sobre a sessão (carregar,
    selecionar núcleo, habilitar/desabilitar grau) seguido de
    :meth:`recompute`. Filtro e resumo recebem o estado explicitamente, a
    sessão apenas o guarda.

    >>> s = Sessao()
    >>> _ = s.carregar_documento({"type": "FeatureCollection", "features": [
    ...     {"type": "Feature", "geometry": None,
    ...      "properties": {"GRAU_RISCO": 1, "NUCLEO": "A", "CUSTO": 50}},
    ...     {"type": "Feature", "geometry": None,
    ...      "properties": {"GRAU_RISCO": 3, "NUCLEO": "B", "CUSTO": 200, "LOTE_APP": "SIM"}},
    ... ]})
    >>> s.recompute().resumo.total_cost
    250.0
    >>> s.set_enabled(3, False)
    >>> s.recompute().resumo.total
    1
    """

    def __init__(self, registro: RegistroGraus | None = None, io: GeoLaudoIO | None = None):
        self.store = LoteStore()
        self.registro = registro or RegistroGraus()
        self.io = io or GeoLaudoIO()
        self.nucleo = config.NUCLEO_TODOS

    def __repr__(self):
        return f"Sessao(lotes={len(self.store.all())}, nucleo={self.nucleo!r}, registro={self.registro!r})"

    # -----------------------------------------------------------------
    # Carga
    # -----------------------------------------------------------------

    def carregar(self, uri, zona=config.ZONA_PADRAO, *, fechar_aneis: bool = False) -> Lotes:
        """
        Lê um arquivo GeoJSON, reprojeta e substitui os lotes da sessão.

        Em caso de :class:`ParseError` ou :class:`ConfigurationError` nada é
        substituído: os lotes anteriores continuam valendo.
        """
        if not is_geodetic_selector(zona):
            parse_zone(zona)

        documento = self.io.read(uri)
        return self.carregar_documento(documento, zona, fechar_aneis=fechar_aneis)

    def carregar_documento(self, documento, zona=config.ZONA_PADRAO, *, fechar_aneis: bool = False) -> Lotes:
        """Como :meth:`carregar`, a partir de um documento já decodificado."""
        reprojetado = reproject_collection(documento, zona, fechar_aneis=fechar_aneis)
        lotes = Lotes.from_collection(reprojetado)
        return self.store.load(lotes)

    # -----------------------------------------------------------------
    # Seleção
    # -----------------------------------------------------------------

    def selecionar_nucleo(self, nucleo: str | None) -> None:
        self.nucleo = nucleo or config.NUCLEO_TODOS

    def set_enabled(self, grau, enabled: bool) -> None:
        self.registro.set_enabled(grau, enabled)

    def toggle(self, grau) -> bool:
        return self.registro.toggle(grau)

    def nucleos(self) -> list[str]:
        return self.store.nucleos()

    # -----------------------------------------------------------------
    # Recalculo
    # -----------------------------------------------------------------

    def filtrados(self) -> Lotes:
        return apply(self.store.all(), self.nucleo, self.registro.enabled_grades())

    def recompute(self) -> Painel:
        lotes = self.filtrados()
        resumo = summarize(lotes)
        logger.debug(
            "Recalculo: nucleo=%r graus=%s -> %d lotes",
            self.nucleo,
            sorted(g.value for g in self.registro.enabled_grades()),
            resumo.total,
        )
        return Painel(lotes=lotes, resumo=resumo)

    def grade_legend(self) -> list[dict]:
        """Legenda dos graus: chave, nome, cor e se está habilitado."""
        return [
            {
                "grau": g.value,
                "nome": g.nome,
                "cor": g.cor,
                "habilitado": self.registro.is_enabled(g),
            }
            for g in GrauRisco
        ]
