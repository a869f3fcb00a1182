"""Configuration for collision claims."""
