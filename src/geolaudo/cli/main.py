import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from geolaudo import config
from geolaudo.compute.filtro import search
from geolaudo.errors import GeoLaudoError
from geolaudo.models.sessao import Sessao

app = typer.Typer(help="CLI do projeto GeoLaudo", pretty_exceptions_enable=False)


def formatar_brl(valor: float) -> str:
    """
    Formata um número como moeda brasileira.

    >>> formatar_brl(1234.5)
    'R$ 1.234,50'
    """
    texto = f"{valor:,.2f}"
    return "R$ " + texto.replace(",", "X").replace(".", ",").replace("X", ".")


def _abrir_sessao(
    arquivo: Path,
    zona: str,
    nucleo: str = config.NUCLEO_TODOS,
    desabilitar: Optional[List[str]] = None,
) -> Sessao:
    sessao = Sessao()
    try:
        sessao.carregar(arquivo, zona)
        for grau in desabilitar or []:
            sessao.set_enabled(grau, False)
    except (GeoLaudoError, FileNotFoundError) as e:
        typer.echo(f"Erro: {e}", err=True)
        raise typer.Exit(code=1)
    sessao.selecionar_nucleo(nucleo)
    return sessao


def _custo_extremo(lote) -> str:
    if lote is None:
        return "N/D"
    return f"{formatar_brl(lote.custo)} (lote {lote.rotulo or 'sem identificação'})"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Mostra mensagens de progresso."),
):
    """
    Análise de lotes por grau de risco, núcleo e APP.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def resumo(
    arquivo: Path = typer.Option(..., "--arquivo", "-i", help="Arquivo GeoJSON de lotes."),
    zona: str = typer.Option(
        config.ZONA_PADRAO, "--zona", "-z", help="Zona UTM de origem (ex.: 23s) ou 'geodetic'."
    ),
    nucleo: str = typer.Option(config.NUCLEO_TODOS, "--nucleo", "-n", help="Núcleo selecionado."),
    desabilitar: Optional[List[str]] = typer.Option(
        None, "--desabilitar", "-d", help="Grau de risco a ocultar (1, 2, 3, 4 ou NA)."
    ),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON."),
):
    """
    Calcula o resumo dos lotes filtrados.
    """
    sessao = _abrir_sessao(arquivo, zona, nucleo, desabilitar)
    r = sessao.recompute().resumo

    if como_json:
        typer.echo(json.dumps(r.to_dict(), ensure_ascii=False, indent=2))
        return

    typer.echo(f"Total de lotes: {r.total}")
    typer.echo(f"Lotes não conformes: {r.non_conforming}")
    typer.echo(f"Lotes em APP: {r.in_preservation_area}")
    typer.echo(
        f"Custo total estimado: {formatar_brl(r.total_cost) if r.has_cost_data else 'N/D'}"
    )
    typer.echo(f"Custo máximo de intervenção: {_custo_extremo(r.max_cost_feature)}")
    typer.echo(f"Custo mínimo de intervenção: {_custo_extremo(r.min_cost_feature)}")
    for grau, n in r.by_grade.items():
        typer.echo(f"  {grau.nome} ({grau.value}): {n}")


@app.command()
def nucleos(
    arquivo: Path = typer.Option(..., "--arquivo", "-i", help="Arquivo GeoJSON de lotes."),
    zona: str = typer.Option(config.ZONA_PADRAO, "--zona", "-z", help="Zona UTM de origem."),
):
    """
    Lista os núcleos presentes no arquivo.
    """
    sessao = _abrir_sessao(arquivo, zona)
    for nome in sessao.nucleos():
        typer.echo(nome)


@app.command()
def exportar(
    arquivo: Path = typer.Option(..., "--arquivo", "-i", help="Arquivo GeoJSON de lotes."),
    saida: str = typer.Option(
        ..., "--saida", "-o", help="Destino (.geojson, .csv ou .parquet; aceita temp://)."
    ),
    zona: str = typer.Option(config.ZONA_PADRAO, "--zona", "-z", help="Zona UTM de origem."),
    nucleo: str = typer.Option(config.NUCLEO_TODOS, "--nucleo", "-n", help="Núcleo selecionado."),
    desabilitar: Optional[List[str]] = typer.Option(
        None, "--desabilitar", "-d", help="Grau de risco a ocultar."
    ),
    busca: str = typer.Option("", "--busca", "-b", help="Filtro textual sobre a tabela."),
):
    """
    Exporta os lotes filtrados (já em coordenadas geodésicas).
    """
    sessao = _abrir_sessao(arquivo, zona, nucleo, desabilitar)
    lotes = search(sessao.filtrados(), busca)

    try:
        out = sessao.io.write(lotes, saida)
    except ValueError as e:
        typer.echo(f"Erro: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"✔ {len(lotes)} lotes exportados para {out}")


def run():
    app()
