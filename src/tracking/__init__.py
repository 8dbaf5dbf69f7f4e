"""Persisted pool snapshot storage."""
