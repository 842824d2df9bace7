"""Clients for services outside the form engine."""
