"""
Persistence adapters.

Services depend on the repository rather than touching the SQLAlchemy session
directly. The repository owns uniqueness and existence queries only; access
rules live in the service layer.
"""
