"""
Social Media Scrapers
"""
from .reddit_scraper import RedditScraper, walk_comments

__all__ = [
    "RedditScraper",
    "walk_comments",
]
