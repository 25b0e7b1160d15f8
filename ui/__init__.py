"""Browser host: FastAPI app, routes and the canvas page."""
