"""Command-line interface for the Full Fuel backend."""
