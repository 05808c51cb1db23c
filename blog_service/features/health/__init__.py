"""Health check feature."""
