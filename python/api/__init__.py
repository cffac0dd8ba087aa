"""
FastAPI Backend for the Tax Calculators

Provides REST API endpoints over the tax computation module.
"""

from .main import app

__all__ = ["app"]
