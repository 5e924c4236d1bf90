"""Bundled circle fixture data."""
