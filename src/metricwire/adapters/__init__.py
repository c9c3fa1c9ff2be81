"""Adapters connecting the core to logging and web frameworks."""
