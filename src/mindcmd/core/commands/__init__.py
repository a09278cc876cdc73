"""Parsing, matching, registry and dispatch of editor commands."""
