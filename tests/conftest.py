import json

import pytest

from geolaudo import Lote


def feature(geometry=None, **properties):
    return {"type": "Feature", "geometry": geometry, "properties": properties}


def lote(**properties):
    return Lote.from_feature(feature(**properties))


@pytest.fixture
def documento_utm():
    """Três lotes em UTM 23S (SIRGAS 2000), cobrindo ponto, polígono e multipolígono."""
    return {
        "type": "FeatureCollection",
        "features": [
            feature(
                {"type": "Point", "coordinates": [333287.1236, 7394586.0946]},
                GRAU_RISCO=1, NUCLEO="A", CUSTO=50, ID_LOTE="L-01",
            ),
            feature(
                {
                    "type": "Polygon",
                    "coordinates": [[
                        [333000.0, 7394000.0],
                        [333100.0, 7394000.0],
                        [333100.0, 7394100.0],
                        [333000.0, 7394100.0],
                        [333000.0, 7394000.0],
                    ]],
                },
                GRAU_RISCO=3, NUCLEO="B", CUSTO=200, LOTE_APP="SIM", ID_LOTE="L-02",
            ),
            feature(
                {
                    "type": "MultiPolygon",
                    "coordinates": [
                        [[
                            [334000.0, 7395000.0],
                            [334050.0, 7395000.0],
                            [334050.0, 7395050.0],
                            [334000.0, 7395000.0],
                        ]],
                    ],
                },
                GRAU_RISCO="NA", NUCLEO="A", ID="L-03",
            ),
        ],
    }


@pytest.fixture
def documento_geodesico():
    return {
        "type": "FeatureCollection",
        "features": [
            feature(
                {
                    "type": "Polygon",
                    "coordinates": [[
                        [-46.0, -23.0], [-45.99, -23.0], [-45.99, -23.01], [-46.0, -23.01], [-46.0, -23.0],
                    ]],
                },
                GRAU_RISCO=2, NUCLEO="Rua Tiradentes", CUSTO=1200.5, ID_LOTE="T-1", TIPO_USO="Residencial",
            ),
            feature(
                {"type": "Point", "coordinates": [-46.1, -23.1]},
                GRAU_RISCO=4, NUCLEO="Guarani", CUSTO="abc", ID_LOTE="G-1", TIPO_USO="Comercial",
            ),
            feature(None, NUCLEO="Guarani", LOTE_APP="sim"),
        ],
    }


@pytest.fixture
def arquivo_utm(tmp_path, documento_utm):
    path = tmp_path / "lotes_utm.geojson"
    path.write_text(json.dumps(documento_utm), encoding="utf-8")
    return path


@pytest.fixture
def arquivo_geodesico(tmp_path, documento_geodesico):
    path = tmp_path / "lotes.geojson"
    path.write_text(json.dumps(documento_geodesico, ensure_ascii=False), encoding="utf-8")
    return path
