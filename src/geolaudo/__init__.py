# geolaudo/__init__.py
from .models.risco import GrauRisco, RegistroGraus
from .models.lote import Lote
from .models.lotes import Lotes, LoteStore
from .models.sessao import Sessao, Painel
from .io.geolaudo_io import GeoLaudoIO
from .errors import GeoLaudoError, ParseError, ConfigurationError, InvalidArgument

__all__ = [
    "GrauRisco",
    "RegistroGraus",
    "Lote",
    "Lotes",
    "LoteStore",
    "Sessao",
    "Painel",
    "GeoLaudoIO",
    "GeoLaudoError",
    "ParseError",
    "ConfigurationError",
    "InvalidArgument",
]

__version__ = "0.1.0"
