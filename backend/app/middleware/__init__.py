"""
Middleware package for request logging and timing.
"""

from .performance import PerformanceMiddleware

__all__ = ["PerformanceMiddleware"]
