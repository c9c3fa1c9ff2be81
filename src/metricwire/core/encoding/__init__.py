"""Encoders for decoded records."""
