"""Command-line interface for nerdscrape."""
