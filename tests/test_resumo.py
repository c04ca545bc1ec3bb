import pytest
from conftest import lote

from geolaudo import GrauRisco, Lotes, Sessao
from geolaudo.compute.resumo import summarize


def test_empty_summary():
    r = summarize([])
    assert (r.total, r.non_conforming, r.in_preservation_area, r.total_cost) == (0, 0, 0, 0.0)
    assert r.max_cost_feature is None
    assert r.min_cost_feature is None
    assert not r.has_cost_data
    assert all(n == 0 for n in r.by_grade.values())


def test_ties_keep_first_occurrence():
    a = lote(CUSTO=100, ID_LOTE="A")
    b = lote(CUSTO=100, ID_LOTE="B")
    r = summarize([a, b])
    assert r.max_cost_feature is a
    assert r.min_cost_feature is a


def test_invalid_costs_are_excluded():
    lotes = [lote(CUSTO="abc"), lote(CUSTO=None), lote(CUSTO=30), lote(CUSTO="70")]
    r = summarize(lotes)
    assert r.total == 4
    assert r.total_cost == 100.0
    assert r.max_cost_feature is lotes[3]
    assert r.min_cost_feature is lotes[2]


def test_no_cost_data_is_not_zero_cost():
    r = summarize([lote(CUSTO="abc"), lote()])
    assert not r.has_cost_data
    assert r.to_dict()["max_cost_feature"] is None


def test_counts_by_grade():
    r = summarize([lote(GRAU_RISCO=1), lote(GRAU_RISCO="1"), lote(GRAU_RISCO=4), lote()])
    assert r.by_grade[GrauRisco.BAIXO] == 2
    assert r.by_grade[GrauRisco.MUITO_ALTO] == 1
    assert r.by_grade[GrauRisco.NA] == 1
    assert sum(r.by_grade.values()) == r.total


def test_summary_of_loaded_collection(documento_utm):
    r = summarize(Lotes.from_collection(documento_utm))
    assert r.total == 3
    assert r.non_conforming == 1
    assert r.in_preservation_area == 1
    assert r.total_cost == 250.0
    assert r.max_cost_feature.rotulo == "L-02"
    assert r.min_cost_feature.rotulo == "L-01"


def test_disabling_grade_changes_summary(documento_utm):
    sessao = Sessao()
    sessao.carregar_documento(documento_utm, "23s")
    sessao.set_enabled(3, False)

    r = sessao.recompute().resumo
    assert r.total == 2
    assert r.total_cost == 50.0
    assert r.non_conforming == 0
    assert r.max_cost_feature.rotulo == "L-01"


def test_to_dict():
    r = summarize([lote(GRAU_RISCO=2, CUSTO=10.5, ID_LOTE="X")])
    d = r.to_dict()
    assert d["total"] == 1
    assert d["non_conforming"] == 1
    assert d["total_cost"] == pytest.approx(10.5)
    assert d["has_cost_data"] is True
    assert d["max_cost_feature"] == {"rotulo": "X", "custo": 10.5}
    assert d["by_grade"] == {"1": 0, "2": 1, "3": 0, "4": 0, "NA": 0}


def test_counts_by_grade_are_read_only():
    r = summarize([lote(GRAU_RISCO=1)])
    with pytest.raises(TypeError):
        r.by_grade[GrauRisco.BAIXO] = 5
    with pytest.raises(TypeError):
        summarize([]).by_grade[GrauRisco.NA] = 1
