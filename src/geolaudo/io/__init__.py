"""
Camada de I/O do GeoLaudo.

Este módulo centraliza a leitura de documentos GeoJSON e a escrita de
resultados (GeoJSON, CSV, Parquet). Ele **não** contém lógica de filtro
ou agregação; apenas resolve onde os dados estão e em que formato.
"""

from .geolaudo_io import GeoLaudoIO

__all__ = [
    "GeoLaudoIO",
]
