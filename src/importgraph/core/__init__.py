"""Core graph construction for importgraph.

Nothing under ``importgraph.core`` touches the file system directly; all I/O
goes through the ``ImportResolver`` and ``ImportExtractor`` collaborators.
"""
