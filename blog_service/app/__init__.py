"""FastAPI application assembly: factory, lifespan, middleware and handlers."""
