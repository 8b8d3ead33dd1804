"""FastAPI application: factory, routers and exception handlers."""
