"""Collision-repair claim lifecycle, estimate, fraud and scheduling rules."""

__version__ = "0.1.0"
