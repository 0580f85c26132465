"""Command-line view layer."""
