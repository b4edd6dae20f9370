"""Command-line interface for safe-seed."""
