"""Shared helpers: random source, simulated latency, rounding, and input sanitization."""
