"""Shared constants for record fields and option sets."""
