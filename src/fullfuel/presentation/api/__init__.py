"""REST API for the Full Fuel TV backend."""

from fullfuel.presentation.api.app import create_app

__all__ = ["create_app"]
