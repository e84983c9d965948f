"""Command-line interface for venstar-ecp."""
