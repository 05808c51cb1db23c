"""Infrastructure adapters (database engine, logging)."""
