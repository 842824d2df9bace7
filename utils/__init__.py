"""Utility helpers shared across the form engine."""
