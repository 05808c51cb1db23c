"""Blog service: posts, categories and users behind a cursor-paginated API."""

__version__ = "1.0.0"
