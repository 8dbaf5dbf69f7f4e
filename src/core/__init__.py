"""Fetcher, paced task loop and filesystem helpers."""
