"""Core schema, validation and rule definitions for record forms."""
