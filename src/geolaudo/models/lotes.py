from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from geolaudo import config
from geolaudo.errors import ParseError
from .lote import Lote

logger = logging.getLogger(__name__)


class Lotes(Sequence):
    """
    Coleção ordenada e imutável de :class:`Lote` (o FeatureCollection).

    Permite iteração, indexação e ``len`` como uma lista, mas não pode ser
    alterada depois de criada.

    >>> lotes = Lotes.from_collection({
    ...     "type": "FeatureCollection",
    ...     "features": [
    ...         {"type": "Feature", "geometry": None, "properties": {"NUCLEO": "B"}},
    ...         {"type": "Feature", "geometry": None, "properties": {"NUCLEO": "A"}},
    ...         {"type": "Feature", "geometry": None, "properties": {}},
    ...     ],
    ... })
    >>> len(lotes)
    3
    >>> lotes.nucleos()
    ['A', 'B']
    """

    def __init__(self, lotes: Iterable[Lote] = (), tipo: str = "FeatureCollection"):
        self._lotes = tuple(lotes)
        self.tipo = tipo

    def __repr__(self):
        return f"Lotes(n={len(self._lotes)})"

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Lotes(self._lotes[index], tipo=self.tipo)
        return self._lotes[index]

    def __len__(self):
        return len(self._lotes)

    def __iter__(self):
        return iter(self._lotes)

    @classmethod
    def from_collection(cls, document: Mapping) -> "Lotes":
        """
        Normaliza um documento GeoJSON decodificado em :class:`Lotes`.

        Um documento sem ``features`` (ou com ``features`` que não seja uma
        lista) gera :class:`ParseError`. Uma lista vazia é válida.
        """
        if not isinstance(document, Mapping):
            raise ParseError(
                f"Documento GeoJSON inválido: esperado objeto, obtido {type(document).__name__}."
            )

        tipo = document.get("type")
        features = document.get("features")

        if not tipo or not isinstance(features, list):
            raise ParseError("Arquivo GeoJSON inválido: 'type' ou 'features' ausente.")

        if tipo != "FeatureCollection":
            logger.warning("Documento do tipo %r não é um FeatureCollection.", tipo)

        return cls((Lote.from_feature(f) for f in features), tipo=tipo)

    def to_collection(self) -> dict:
        return {
            "type": "FeatureCollection",
            "features": [lote.to_feature() for lote in self._lotes],
        }

    def nucleos(self) -> list[str]:
        """Núcleos selecionáveis: únicos, ordenados, sem o sentinela ``N/A``."""
        return sorted({l.nucleo for l in self._lotes if l.nucleo != config.NUCLEO_AUSENTE})


class LoteStore:
    """
    Fonte única de verdade sobre "todos os lotes" carregados.

    Cada :meth:`load` substitui o conjunto anterior de uma só vez; entre
    cargas o conjunto é imutável.

    >>> store = LoteStore()
    >>> len(store.all())
    0
    """

    def __init__(self):
        self._lotes = Lotes()

    def load(self, collection) -> Lotes:
        """
        Substitui incondicionalmente o conjunto de lotes.

        Aceita :class:`Lotes` ou um documento GeoJSON (já reprojetado).
        A normalização acontece antes da troca: se falhar, o conjunto
        anterior permanece intacto.
        """
        if isinstance(collection, Lotes):
            lotes = collection
        else:
            lotes = Lotes.from_collection(collection)

        self._lotes = lotes
        logger.info("%d lotes carregados.", len(lotes))
        return lotes

    def all(self) -> Lotes:
        return self._lotes

    def nucleos(self) -> list[str]:
        return self._lotes.nucleos()
