"""
FastAPI RESTful API for the Book Management service.

This module exposes the in-memory book library over HTTP:
- Listing, lookup and case-insensitive search of books
- Creating, updating and deleting books
- Uniform JSON error bodies and an endpoint catalog for unknown routes
"""
