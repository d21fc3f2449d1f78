"""Nursery registry fetcher."""
