"""Command line interface for pqdigest (`pqdigest` console script)."""
