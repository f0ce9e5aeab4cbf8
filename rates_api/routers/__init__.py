"""
FastAPI routers grouped by resource.

Each module exposes an APIRouter included by the application factory
(app.py). Handlers reach the configured store through request.app.state.
"""
