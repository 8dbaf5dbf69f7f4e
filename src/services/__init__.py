"""Aggregation, scoring, integrity gate and pipeline orchestration."""
