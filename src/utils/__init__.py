"""Text and name helpers."""
