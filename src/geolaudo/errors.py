"""
Hierarquia de erros do GeoLaudo.

Todos os erros são determinísticos (dados ou configuração inválidos) e
nunca são reexecutados automaticamente.
"""


class GeoLaudoError(Exception):
    """Erro base do pacote."""


class ParseError(GeoLaudoError, ValueError):
    """O documento de entrada não é um GeoJSON estruturalmente válido."""


class ConfigurationError(GeoLaudoError, ValueError):
    """Identificador de zona de projeção ausente, malformado ou fora da faixa."""


class InvalidArgument(GeoLaudoError, ValueError):
    """Argumento fora de um conjunto fechado (ex.: grau de risco desconhecido)."""
