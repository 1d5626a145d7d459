"""api/ -- FastAPI application, HTTP models, and routers."""
