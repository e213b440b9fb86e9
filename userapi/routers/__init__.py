"""
FastAPI routers grouped by domain (auth, users).

Each module exposes an APIRouter that is included in the main application
(app.py). Endpoints only translate HTTP to service calls and back.
"""
