"""Core domain: models, ports, parsers and the replacement engine."""
