"""
Scrapers Module
"""
from .base import BaseScraper, RateLimitedScraper
from .social import (
    TwitterScraper,
    search_twitter,
)

__all__ = [
    # Base
    "BaseScraper",
    "RateLimitedScraper",
    # Social
    "TwitterScraper",
    "search_twitter",
]
