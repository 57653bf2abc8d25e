"""HTTP API for SEOCrawl."""
