"""Persistence implementations for fullfuel_identity."""
