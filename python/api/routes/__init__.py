"""
API Routes Package

Contains all route modules for the tax calculator API.
"""

from .calculators import router as calculators_router
from .rates import router as rates_router

__all__ = [
    "calculators_router",
    "rates_router",
]
