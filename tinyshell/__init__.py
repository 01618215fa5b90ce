"""A small interactive shell with pipelines, redirections, here-documents and variable expansion."""

__version__ = "0.1.0"