"""Command-line interface for importgraph."""
