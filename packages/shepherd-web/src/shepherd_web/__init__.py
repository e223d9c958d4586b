"""Shepherd console server: route gating and auth relay in front of the backend API."""

__version__ = "0.1.0"
