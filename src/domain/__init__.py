"""Domain models, roster loading and entity resolution."""
