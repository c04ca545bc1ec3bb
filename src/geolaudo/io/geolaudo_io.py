# geolaudo_io.py
"""
geolaudo_io – leitura de documentos GeoJSON e escrita de resultados.

Este módulo define a classe GeoLaudoIO, responsável por transformar URIs em
caminhos locais, decodificar documentos GeoJSON e gravar os lotes filtrados
nos formatos de saída (GeoJSON, CSV e Parquet).

Exemplo de uso:

    from geolaudo import GeoLaudoIO, Sessao

    fio = GeoLaudoIO()
    doc = fio.read("dados/lotes.geojson")

    sessao = Sessao(io=fio)
    sessao.carregar_documento(doc, "23s")
    fio.write_table(sessao.filtrados(), "temp://lotes.csv")
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Union
from urllib.parse import urlparse

import geopandas as gpd
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from geolaudo import config
from geolaudo.compute.area import area_m2
from geolaudo.errors import ParseError
from geolaudo.models.lote import Lote
from geolaudo.models.lotes import Lotes

logger = logging.getLogger(__name__)

COLUNAS_TABELA = [
    "rotulo",
    "nucleo",
    "tipo_uso",
    "area_m2",
    "grau_risco",
    "em_app",
    "custo",
]


class GeoLaudoIO:
    """
    Operações de leitura e escrita do GeoLaudo.

    Parâmetros
    ----------
    temp_dir : Optional[Path]
        Diretório usado para URIs ``temp://``. Padrão: ``config.PROJECT_TEMP_DIR``.
    crs : str
        CRS atribuído aos GeoDataFrames gerados. Padrão: ``config.CRS_GEODESICO``.
    """

    def __init__(self, temp_dir: Optional[Path] = None, crs: str = config.CRS_GEODESICO):
        self.temp_dir = Path(temp_dir) if temp_dir else config.PROJECT_TEMP_DIR
        self.crs = crs

    def resolve_path(self, uri: Union[str, Path]) -> Path:
        """
        Resolve um URI em caminho local.

        >>> GeoLaudoIO(temp_dir="/tmp/gl").resolve_path("temp://saida/lotes.csv").as_posix()
        '/tmp/gl/saida/lotes.csv'
        >>> GeoLaudoIO().resolve_path("file:///dados/lotes.geojson").as_posix()
        '/dados/lotes.geojson'
        """
        if isinstance(uri, Path):
            return uri

        parsed = urlparse(uri)

        # 1) Esquema temporário controlado pelo projeto
        if parsed.scheme == "temp":
            # ex.: "temp://lotes.csv" -> netloc = "lotes.csv"
            rel_path = (parsed.netloc + parsed.path).lstrip("/")
            return self.temp_dir / rel_path

        # 2) Esquema file:// -> path local
        if parsed.scheme == "file":
            return Path(parsed.path)

        # 3) Caso contrário, tratar como path diretamente
        return Path(uri)

    # -----------------------------------------------------------------
    # Leitura
    # -----------------------------------------------------------------

    def read(self, uri: Union[str, Path]) -> dict:
        """
        Lê e decodifica um documento GeoJSON.

        Falhas de decodificação viram :class:`ParseError`; arquivo ausente
        propaga ``FileNotFoundError``.
        """
        path = self.resolve_path(uri)
        logger.info("Lendo %s", path)
        return self.parse(path.read_bytes())

    def parse(self, content: Union[str, bytes]) -> dict:
        """
        Decodifica um documento GeoJSON a partir de texto ou bytes.

        >>> GeoLaudoIO().parse('{"type": "FeatureCollection", "features": []}')["type"]
        'FeatureCollection'
        """
        try:
            if isinstance(content, bytes):
                content = content.decode("utf-8-sig")
            documento = json.loads(content)
        except ValueError as e:
            # inclui JSONDecodeError, UnicodeDecodeError e inteiros longos demais
            raise ParseError(f"Documento GeoJSON inválido: {e}") from e

        if not isinstance(documento, dict):
            raise ParseError(
                f"Documento GeoJSON inválido: esperado objeto, obtido {type(documento).__name__}."
            )
        return documento

    # -----------------------------------------------------------------
    # Conversões
    # -----------------------------------------------------------------

    def to_dataframe(self, lotes: Iterable[Lote]) -> pd.DataFrame:
        """Tabela de lotes: uma linha por lote, colunas em ``COLUNAS_TABELA``."""
        linhas = [
            {
                "rotulo": lote.rotulo,
                "nucleo": lote.nucleo,
                "tipo_uso": lote.properties.get(config.PROP_TIPO_USO),
                "area_m2": area_m2(lote.geometry),
                "grau_risco": lote.grau.value,
                "em_app": "Sim" if lote.em_app else "Não",
                "custo": lote.custo,
            }
            for lote in lotes
        ]
        df = pd.DataFrame(linhas, columns=COLUNAS_TABELA)
        df["area_m2"] = pd.to_numeric(df["area_m2"], errors="coerce")
        df["custo"] = pd.to_numeric(df["custo"], errors="coerce")
        df["tipo_uso"] = df["tipo_uso"].map(lambda v: None if pd.isna(v) else str(v))
        return df

    def to_geodataframe(self, lotes: Iterable[Lote]) -> gpd.GeoDataFrame:
        """GeoDataFrame com as propriedades originais e a geometria de cada lote."""
        features = [l.to_feature() for l in lotes]
        if not features:
            return gpd.GeoDataFrame(geometry=[], crs=self.crs)
        return gpd.GeoDataFrame.from_features(features, crs=self.crs)

    # -----------------------------------------------------------------
    # Escrita
    # -----------------------------------------------------------------

    def _prepare(self, uri) -> Path:
        uri_path = self.resolve_path(uri)
        # Garantir diretório, se tiver
        if uri_path.parent:
            uri_path.parent.mkdir(parents=True, exist_ok=True)
        return uri_path

    def write_geojson(self, lotes: Iterable[Lote], uri: Union[str, Path]) -> str:
        uri_path = self._prepare(uri)
        uri_path.write_text(
            json.dumps(Lotes(lotes).to_collection(), ensure_ascii=False),
            encoding="utf-8",
        )
        return uri_path.as_posix()

    def write_table(self, lotes: Iterable[Lote], uri: Union[str, Path]) -> str:
        """
        Grava a tabela de lotes em ``.csv`` (``;``, todos os campos entre aspas)
        ou ``.parquet``. Outras extensões geram ``ValueError``.
        """
        sufixo = self.resolve_path(uri).suffix.lower()
        if sufixo not in (".csv", ".parquet"):
            raise ValueError(f"Formato de tabela não suportado: '{sufixo}'.")

        uri_path = self._prepare(uri)
        df = self.to_dataframe(lotes)

        if sufixo == ".csv":
            df.to_csv(
                uri_path,
                sep=config.CSV_SEPARADOR,
                index=False,
                quoting=csv.QUOTE_ALL,
                encoding="utf-8",
            )
        else:
            pq.write_table(pa.Table.from_pandas(df, preserve_index=False), uri_path.as_posix())

        logger.info("Tabela com %d lotes gravada em %s", len(df), uri_path)
        return uri_path.as_posix()

    def write(self, lotes: Iterable[Lote], uri: Union[str, Path]) -> str:
        """Escolhe o formato de saída pela extensão do URI."""
        if self.resolve_path(uri).suffix.lower() in (".geojson", ".json"):
            return self.write_geojson(lotes, uri)
        return self.write_table(lotes, uri)
