"""Configuration constants and source page map."""
