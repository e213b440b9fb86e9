"""
High-level use cases for the user management API.

Each service orchestrates the repository to implement business rules (who may
update, delete or restore an account, login uniqueness, credential checks).

Routers (FastAPI endpoints) call these services instead of touching the
database session directly.
"""
