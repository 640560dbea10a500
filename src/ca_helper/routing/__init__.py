"""Filtering, scoring and grouping of tasks into boss recommendations."""
