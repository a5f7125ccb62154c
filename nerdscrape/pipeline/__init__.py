"""Scrape pipeline: mode selection, enrichment, assembly, persistence.

The entry point is :func:`nerdscrape.pipeline.runner.run_scrape`.
"""
