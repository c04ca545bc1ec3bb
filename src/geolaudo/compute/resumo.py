"""
Agregação de estatísticas sobre um conjunto de lotes.

Recebe qualquer subconjunto de lotes (tipicamente o resultado do filtro)
e devolve um :class:`Resumo`. Não conhece sessão, registro ou I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from geolaudo.models.lote import Lote
from geolaudo.models.risco import GrauRisco


@dataclass(frozen=True)
class Resumo:
    """
    Estatísticas de um conjunto de lotes.

    ``max_cost_feature`` e ``min_cost_feature`` são ``None`` quando nenhum
    lote tem custo numérico válido; nesse caso ``has_cost_data`` é falso e
    quem exibe o resumo deve mostrar "sem dados de custo", não zero.
    """

    total: int = 0
    non_conforming: int = 0
    in_preservation_area: int = 0
    total_cost: float = 0.0
    max_cost_feature: Lote | None = None
    min_cost_feature: Lote | None = None
    by_grade: Mapping = field(default_factory=lambda: MappingProxyType({g: 0 for g in GrauRisco}))

    @property
    def has_cost_data(self) -> bool:
        return self.max_cost_feature is not None

    def to_dict(self) -> dict:
        def _extremo(lote: Lote | None):
            if lote is None:
                return None
            return {"rotulo": lote.rotulo, "custo": lote.custo}

        return {
            "total": self.total,
            "non_conforming": self.non_conforming,
            "in_preservation_area": self.in_preservation_area,
            "total_cost": self.total_cost,
            "has_cost_data": self.has_cost_data,
            "max_cost_feature": _extremo(self.max_cost_feature),
            "min_cost_feature": _extremo(self.min_cost_feature),
            "by_grade": {g.value: n for g, n in self.by_grade.items()},
        }


def summarize(lotes: Iterable[Lote]) -> Resumo:
    """
    Calcula contagens, custo total e lotes de custo extremo.

    - ``non_conforming``: grau numérico maior que 1 **ou** lote em APP.
    - ``total_cost``: soma apenas dos custos numéricos válidos.
    - Extremos: escolhidos apenas entre lotes com custo válido; em caso de
      empate vence o primeiro na ordem de entrada (comparação estrita).

    >>> summarize([]).total, summarize([]).max_cost_feature
    (0, None)
    """
    total = 0
    non_conforming = 0
    in_app = 0
    total_cost = 0.0
    maximo: Lote | None = None
    minimo: Lote | None = None
    by_grade = {g: 0 for g in GrauRisco}

    for lote in lotes:
        total += 1
        by_grade[lote.grau] += 1

        if lote.nao_conforme:
            non_conforming += 1
        if lote.em_app:
            in_app += 1

        if lote.custo is None:
            continue

        total_cost += lote.custo
        if maximo is None or lote.custo > maximo.custo:
            maximo = lote
        if minimo is None or lote.custo < minimo.custo:
            minimo = lote

    return Resumo(
        total=total,
        non_conforming=non_conforming,
        in_preservation_area=in_app,
        total_cost=total_cost,
        max_cost_feature=maximo,
        min_cost_feature=minimo,
        by_grade=MappingProxyType(by_grade),
    )
