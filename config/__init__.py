"""Configuration package; see settings.py."""
