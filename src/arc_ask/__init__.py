"""arc-ask: pipe-friendly command-line front end for asking an AI model."""

__version__ = "0.1.0"
