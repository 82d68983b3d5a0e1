"""Parsing and coercion helpers for form values."""
