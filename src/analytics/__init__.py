"""Filtering and statistics over canonical sale records."""
