from .risco import GrauRisco, RegistroGraus
from .lote import Lote
from .lotes import Lotes, LoteStore

__all__ = [
    "GrauRisco",
    "RegistroGraus",
    "Lote",
    "Lotes",
    "LoteStore",
]
