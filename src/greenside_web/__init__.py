"""GREENSIDE web service."""
