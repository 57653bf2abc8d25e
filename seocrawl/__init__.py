"""SEOCrawl: same-origin site crawler with durable crawl sessions."""

__version__ = "0.1.0"
