"""Chunked publish pipeline for the nest package registry."""

__version__ = "0.1.0"
