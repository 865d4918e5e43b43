"""
API v1 Routes

Blueprints organized by category for Swagger UI navigation.
"""

# MARKET DATA
from .stock_routes import blp as stocks_bp
from .ipo_routes import blp as ipos_bp
from .market_routes import blp as market_bp

# SYSTEM
from .system_routes import blp as system_bp

__all__ = [
    "stocks_bp",
    "ipos_bp",
    "market_bp",
    "system_bp",
]
