"""Infrastructure layer for fullfuel_identity."""
