"""
API test package for the todo service.

This package contains tests for the HTTP endpoints.
Tests use the Flask test client and demonstrate:
- Registration and login flows
- CRUD operation testing
- Input validation testing
- Error envelope and status code checks
"""
