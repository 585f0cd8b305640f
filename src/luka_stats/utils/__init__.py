"""Utility functions"""

from .rate_limiter import FixedWindowRateLimiter

__all__ = ["FixedWindowRateLimiter"]
