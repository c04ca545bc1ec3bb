"""
Constantes e parâmetros do ecossistema GeoLaudo.

Valores fixos (chaves de propriedades, sentinelas, elipsoide) ficam como
constantes de módulo. Os padrões que dependem do ambiente são lidos de
variáveis de ambiente uma única vez, na importação.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Chaves de propriedades dos lotes (sensíveis a maiúsculas)
# ---------------------------------------------------------------------

PROP_GRAU = "GRAU_RISCO"
PROP_NUCLEO = "NUCLEO"
PROP_CUSTO = "CUSTO"
PROP_APP = "LOTE_APP"
PROP_ROTULOS = ("ID_LOTE", "ID")
PROP_TIPO_USO = "TIPO_USO"

VALOR_APP = "SIM"

# ---------------------------------------------------------------------
# Sentinelas de núcleo
# ---------------------------------------------------------------------

NUCLEO_TODOS = "all"
NUCLEO_AUSENTE = "N/A"

# ---------------------------------------------------------------------
# Reprojeção
# ---------------------------------------------------------------------

ELIPSOIDE = "GRS80"

# seletores que indicam "já está em coordenadas geodésicas"
GEODESICO = "geodetic"
SELETORES_GEODESICOS = {"geodetic", "geodesico", "wgs84", "latlon"}

ZONA_PADRAO = os.getenv("GEOLAUDO_ZONA", GEODESICO)

# SIRGAS 2000 geográfico (GRS80)
CRS_GEODESICO = os.getenv("GEOLAUDO_CRS", "EPSG:4674")

# ---------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------

PROJECT_TEMP_DIR = Path(
    os.getenv("GEOLAUDO_TMP_DIR", Path.cwd() / "geolaudo_tmp")
)

CSV_SEPARADOR = ";"
