import os
from functools import lru_cache

import pandas as pd


SYMBOLS_CSV = os.path.join(os.path.dirname(__file__), "..", "config", "nepse_stocks.csv")


@lru_cache(maxsize=1)
def _load_symbols(path=SYMBOLS_CSV):
    df = pd.read_csv(path, dtype={"symbol": str, "name": str, "sector": str})
    df["symbol"] = df["symbol"].str.strip().str.upper()
    df["base"] = pd.to_numeric(df["base"], errors="coerce").fillna(300.0)
    return df.drop_duplicates(subset="symbol", keep="first").reset_index(drop=True)


class SymbolsRepository:
    """Static table of listed companies: symbol, name, sector and a reference price."""

    @staticmethod
    def get_all():
        return _load_symbols().to_dict("records")

    @staticmethod
    def get_symbol_table():
        df = _load_symbols()
        return df.set_index("symbol")[["name", "sector", "base"]].to_dict("index")

    @staticmethod
    def get_stock_info(symbol):
        if not symbol:
            return None
        return SymbolsRepository.get_symbol_table().get(symbol.upper())

    @staticmethod
    def get_company_name(symbol):
        info = SymbolsRepository.get_stock_info(symbol)
        return info["name"] if info else symbol

    @staticmethod
    def get_all_symbols():
        return _load_symbols()["symbol"].tolist()

    @staticmethod
    def get_stocks_by_sector(sector):
        df = _load_symbols()
        return df[df["sector"].str.lower() == sector.lower()].to_dict("records")

    @staticmethod
    def get_all_sectors():
        return _load_symbols()["sector"].drop_duplicates().tolist()
