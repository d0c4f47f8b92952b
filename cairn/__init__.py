"""Cairn - a tick-driven text adventure engine."""

__version__ = "0.3.0"
