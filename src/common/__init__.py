"""Shared helpers: HTTP, logging, errors and text classification."""
