"""Command-line interfaces for ghmcp."""
