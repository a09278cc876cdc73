"""Domain models for the command engine."""
