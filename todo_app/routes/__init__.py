"""
Routes package for the todo service.

This package contains the route blueprint:
- api: JSON endpoints for registration, login and per-user todos
"""
