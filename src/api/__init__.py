"""
Control API (FastAPI)
"""

from .main import create_app

__all__ = ["create_app"]
