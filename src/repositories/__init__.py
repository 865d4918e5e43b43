from .symbols_repository import SymbolsRepository
from .stock_repository import StockRepository
from .market_repository import MarketRepository
from .ipo_repository import IPORepository

__all__ = [
    "SymbolsRepository",
    "StockRepository",
    "MarketRepository",
    "IPORepository",
]
