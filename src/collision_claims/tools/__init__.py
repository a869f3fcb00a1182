"""Stateless claim rules: damage analysis, pricing, estimates, fraud, scheduling, timeline, and messaging helpers."""
