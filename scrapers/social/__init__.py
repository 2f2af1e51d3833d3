"""
Social Media Scrapers
"""
from .twitter_scraper import TwitterScraper, search_twitter

__all__ = [
    "TwitterScraper",
    "search_twitter",
]
