"""
Core utilities shared across the user management API.

This package hosts configuration, password hashing and bearer token helpers.
Services depend on these primitives instead of reading the environment or
importing crypto libraries directly.
"""
