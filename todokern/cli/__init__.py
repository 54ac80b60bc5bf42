"""Command-line interface for todokern."""
