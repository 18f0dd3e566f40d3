"""
Scrapers Module
"""
from .base import BaseScraper, RateLimitedScraper
from .social import RedditScraper

__all__ = [
    "BaseScraper",
    "RateLimitedScraper",
    "RedditScraper",
]
