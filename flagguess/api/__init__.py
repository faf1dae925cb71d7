"""
API endpoints package.
"""
from flagguess.api import countries, health, scores

__all__ = ["countries", "health", "scores"]
