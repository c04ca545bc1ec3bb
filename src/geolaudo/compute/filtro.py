"""
Filtragem de lotes por núcleo e por graus de risco habilitados.

Funções puras: as mesmas entradas sempre produzem a mesma saída, e a ordem
de entrada é preservada. Não conhecem o registro de graus nem a sessão,
apenas recebem os valores explícitos.
"""

from __future__ import annotations

from collections.abc import Iterable

from geolaudo import config
from geolaudo.models.lote import Lote
from geolaudo.models.lotes import Lotes
from geolaudo.models.risco import GrauRisco


def _canonical_grades(graus: Iterable) -> frozenset[str]:
    chaves = set()
    for grau in graus:
        if isinstance(grau, GrauRisco):
            chaves.add(grau.value)
        else:
            chave = GrauRisco.canonical(grau)
            if chave is None:
                continue
            if chave.upper() == GrauRisco.NA.value:
                chave = GrauRisco.NA.value
            chaves.add(chave)
    return frozenset(chaves)


def apply(
    lotes: Iterable[Lote],
    nucleo: str = config.NUCLEO_TODOS,
    graus: Iterable = tuple(GrauRisco),
) -> Lotes:
    """
    Aplica o filtro de núcleo e de graus de risco.

    1. Se ``nucleo`` não for ``"all"``, mantém apenas os lotes cujo núcleo
       (``"N/A"`` quando ausente) é exatamente igual a ``nucleo``.
    2. Do resultado, mantém apenas os lotes cujo grau (``NA`` quando ausente
       ou desconhecido) está em ``graus``. A comparação usa a forma canônica
       em texto, então ``2`` e ``"2"`` são o mesmo grau.

    Um núcleo que não existe nos dados não é erro: produz uma seleção vazia.

    Parameters
    ----------
    lotes : Iterable[Lote]
        Todos os lotes carregados.

    nucleo : str, default="all"
        Núcleo selecionado.

    graus : Iterable
        Graus habilitados (:class:`GrauRisco`, números ou textos).

    Returns
    -------
    Lotes
        Subconjunto filtrado, na ordem original.
    """
    habilitados = _canonical_grades(graus)

    selecionados = (
        lote
        for lote in lotes
        if (nucleo == config.NUCLEO_TODOS or lote.nucleo == nucleo)
        and lote.grau.value in habilitados
    )
    return Lotes(selecionados)


def search(lotes: Iterable[Lote], termo: str) -> Lotes:
    """
    Busca textual (sem distinção de maiúsculas) sobre rótulo, núcleo, grau e tipo de uso.

    Um termo vazio devolve todos os lotes.
    """
    termo = (termo or "").strip().casefold()
    if not termo:
        return Lotes(lotes)

    def _texto(lote: Lote) -> str:
        campos = (
            lote.rotulo,
            lote.nucleo,
            lote.grau.value,
            lote.properties.get(config.PROP_TIPO_USO),
        )
        return " ".join(str(c) for c in campos if c is not None).casefold()

    return Lotes(lote for lote in lotes if termo in _texto(lote))
