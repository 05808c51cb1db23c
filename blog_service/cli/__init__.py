"""Command-line interface for blog-service."""
