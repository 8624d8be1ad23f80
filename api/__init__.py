"""api/ -- FastAPI application, wire models and routers."""
