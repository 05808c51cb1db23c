"""Categories feature."""
