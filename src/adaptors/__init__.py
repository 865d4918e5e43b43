from .mock_adaptor import MockAdaptor
from .nepse_adaptor import NepseAdaptor
from .proxy_adaptor import ProxyAdaptor
from .scraper_adaptor import ScraperAdaptor
from .time_adaptor import TimeAdaptor

__all__ = [
    "MockAdaptor",
    "NepseAdaptor",
    "ProxyAdaptor",
    "ScraperAdaptor",
    "TimeAdaptor",
]
