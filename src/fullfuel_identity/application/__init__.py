"""Application layer for fullfuel_identity."""
