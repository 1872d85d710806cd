"""
Test suite for the todo service.

This package contains:
- unit/: record store, models, schemas and core services in isolation
- integration/: HTTP endpoints through the Flask test client
- security/: authentication, ownership isolation and input hardening
"""
