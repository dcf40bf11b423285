"""Shared helpers: configuration, logging, output rendering and stdin access."""
