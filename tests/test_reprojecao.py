import copy

import pytest
from conftest import feature

from geolaudo.compute import reprojecao
from geolaudo.compute.reprojecao import (
    Zona,
    close_rings,
    parse_zone,
    reproject_collection,
    reproject_geometry,
    reproject_point,
)
from geolaudo.errors import ConfigurationError, ParseError

# ~0.1 m em latitude
TOL = 1e-6


@pytest.mark.parametrize(
    "easting, northing, zona, lon, lat",
    [
        (333287.1236, 7394586.0946, "23s", -46.633308, -23.550520),
        (683634.0734, 7466045.8355, "23S", -43.2096, -22.9035),
        (440290.4581, 4474257.3819, "30n", -3.7038, 40.4168),
    ],
)
def test_reproject_point_matches_known_fixtures(easting, northing, zona, lon, lat):
    got_lon, got_lat = reproject_point(easting, northing, zona)
    assert got_lon == pytest.approx(lon, abs=TOL)
    assert got_lat == pytest.approx(lat, abs=TOL)


def test_reproject_point_central_meridian():
    lon, lat = reproject_point(500000.0, 10000000.0, Zona(23, sul=True))
    assert lon == pytest.approx(-45.0, abs=1e-9)
    assert lat == pytest.approx(0.0, abs=1e-9)


def test_hemisphere_suffix_other_than_s_is_north():
    assert reproject_point(440290.4581, 4474257.3819, "30x") == reproject_point(
        440290.4581, 4474257.3819, "30n"
    )
    assert reproject_point(440290.4581, 4474257.3819, 30) == reproject_point(
        440290.4581, 4474257.3819, "30"
    )


@pytest.mark.parametrize("zona", ["", "abc", "0s", "61s", "23ss", "s23", None, 23.5, True])
def test_parse_zone_rejects_malformed(zona):
    with pytest.raises(ConfigurationError):
        parse_zone(zona)


def test_parse_zone_accepts_whitespace_and_case():
    assert parse_zone(" 23 S ") == Zona(23, sul=True)
    assert parse_zone("7") == Zona(7, sul=False)


def test_reproject_geometry_preserves_multipolygon_structure():
    coords = [
        [
            [[333000.0, 7394000.0], [333100.0, 7394000.0], [333100.0, 7394100.0], [333000.0, 7394000.0]],
            [[333010.0, 7394010.0], [333020.0, 7394010.0], [333010.0, 7394010.0]],
        ],
        [
            [[334000.0, 7395000.0, 780.0], [334050.0, 7395000.0, 781.0], [334000.0, 7395000.0, 780.0]],
        ],
    ]
    original = copy.deepcopy(coords)

    result = reproject_geometry(coords, "23s")

    assert coords == original
    assert len(result) == len(coords)
    for poly_in, poly_out in zip(coords, result):
        assert len(poly_in) == len(poly_out)
        for ring_in, ring_out in zip(poly_in, poly_out):
            assert len(ring_in) == len(ring_out)
            for p_in, p_out in zip(ring_in, ring_out):
                assert len(p_in) == len(p_out)
                assert -180 <= p_out[0] <= 180
                assert -90 <= p_out[1] <= 90
                assert p_out[2:] == p_in[2:]


def test_reproject_geometry_point_and_linestring():
    point = reproject_geometry([333287.1236, 7394586.0946], "23s")
    assert point == pytest.approx([-46.633308, -23.550520], abs=TOL)

    line = reproject_geometry([[333287.1236, 7394586.0946], [683634.0734, 7466045.8355]], "23s")
    assert line[1] == pytest.approx([-43.2096, -22.9035], abs=TOL)


def test_reproject_geometry_passes_through_short_leaves():
    result = reproject_geometry([[5], [333287.1236, 7394586.0946], [7, "x"], []], "23s")
    assert result[0] == [5]
    assert result[2] == [7, "x"]
    assert result[3] == []
    assert result[1][0] == pytest.approx(-46.633308, abs=TOL)


def test_reproject_geometry_invalid_zone_fails_before_walking():
    with pytest.raises(ConfigurationError):
        reproject_geometry([[1.0, 2.0]], "zona")


def test_reproject_collection_transforms_features_and_keeps_properties(documento_utm):
    original = copy.deepcopy(documento_utm)

    result = reproject_collection(documento_utm, "23s")

    assert documento_utm == original
    assert result["type"] == "FeatureCollection"
    assert len(result["features"]) == 3
    for f_in, f_out in zip(documento_utm["features"], result["features"]):
        assert f_out["properties"] == f_in["properties"]
        assert f_out["geometry"]["type"] == f_in["geometry"]["type"]
    assert result["features"][0]["geometry"]["coordinates"] == pytest.approx(
        [-46.633308, -23.550520], abs=TOL
    )


def test_reproject_collection_geodetic_selector_is_identity(documento_geodesico):
    for seletor in (None, "geodetic", "WGS84"):
        result = reproject_collection(documento_geodesico, seletor)
        assert result == documento_geodesico
        assert result is not documento_geodesico


def test_reproject_collection_declared_geographic_crs_is_not_transformed(documento_geodesico):
    documento_geodesico["crs"] = {
        "type": "name",
        "properties": {"name": "urn:ogc:def:crs:OGC:1.3:CRS84"},
    }
    result = reproject_collection(documento_geodesico, "23s")
    assert result == documento_geodesico


def test_reproject_collection_drops_crs_member_after_transform(documento_utm):
    documento_utm["crs"] = {"type": "name", "properties": {"name": "urn:ogc:def:crs:EPSG::31983"}}
    result = reproject_collection(documento_utm, "23s")
    assert "crs" not in result


def test_reproject_collection_invalid_zone_aborts(documento_utm):
    with pytest.raises(ConfigurationError):
        reproject_collection(documento_utm, "99z")


def test_reproject_collection_rejects_malformed_documents():
    with pytest.raises(ParseError):
        reproject_collection(["not", "a", "document"], "23s")
    with pytest.raises(ParseError):
        reproject_collection({"type": "FeatureCollection", "features": "x"}, "23s")


def test_reproject_collection_feature_and_geometry_collection():
    feature = {
        "type": "Feature",
        "properties": {"NUCLEO": "A"},
        "geometry": {
            "type": "GeometryCollection",
            "geometries": [{"type": "Point", "coordinates": [333287.1236, 7394586.0946]}],
        },
    }
    result = reproject_collection(feature, "23s")
    point = result["geometry"]["geometries"][0]["coordinates"]
    assert point == pytest.approx([-46.633308, -23.550520], abs=TOL)
    assert result["properties"] == {"NUCLEO": "A"}


def test_null_geometry_is_kept():
    doc = {"type": "FeatureCollection", "features": [{"type": "Feature", "geometry": None, "properties": {}}]}
    assert reproject_collection(doc, "23s")["features"][0]["geometry"] is None


def test_close_rings_only_when_requested():
    doc = {
        "type": "FeatureCollection",
        "features": [
            feature({"type": "Polygon", "coordinates": [[[333000.0, 7394000.0], [333100.0, 7394000.0], [333100.0, 7394100.0]]]}),
        ],
    }

    aberto = reproject_collection(doc, "23s")["features"][0]["geometry"]["coordinates"][0]
    fechado = reproject_collection(doc, "23s", fechar_aneis=True)["features"][0]["geometry"]["coordinates"][0]

    assert len(aberto) == 3
    assert len(fechado) == 4
    assert fechado[0] == fechado[-1]


def test_close_rings_appends_first_vertex():
    geom = {"type": "MultiPolygon", "coordinates": [[[[0, 0], [1, 0], [1, 1]]]]}
    closed = close_rings(geom)
    assert closed["coordinates"][0][0] == [[0, 0], [1, 0], [1, 1], [0, 0]]
    assert geom["coordinates"][0][0] == [[0, 0], [1, 0], [1, 1]]
    assert close_rings({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})["coordinates"] == [[0, 0], [1, 1]]


def test_transformer_is_cached_per_zone():
    reprojecao._transformer.cache_clear()
    reproject_point(333287.1236, 7394586.0946, "23s")
    reproject_point(333287.1236, 7394586.0946, "23S")
    assert reprojecao._transformer.cache_info().currsize == 1


@pytest.mark.parametrize("props", [["x"], "EPSG:4326", None, {"name": ["EPSG:4326"]}])
def test_malformed_crs_member_is_ignored(documento_utm, props):
    documento_utm["crs"] = {"type": "name", "properties": props}
    result = reproject_collection(documento_utm, "23s")
    assert "crs" not in result
    assert result["features"][0]["geometry"]["coordinates"] == pytest.approx(
        [-46.633308, -23.550520], abs=TOL
    )
