"""
Route modules for the EdgeCore API.

This package contains modular route definitions split by functionality.
"""

from .system import router as system_router
from .imports import router as imports_router
from .trades import router as trades_router
from .simulations import router as simulations_router

__all__ = [
    "system_router",
    "imports_router",
    "trades_router",
    "simulations_router",
]
