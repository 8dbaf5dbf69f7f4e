"""Table classification, column location and table extraction."""
