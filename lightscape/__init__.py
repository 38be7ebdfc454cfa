"""Spatial grid layout of lighting devices and position-driven lighting effects."""

__version__ = "1.0.0a0"