"""
In-memory book library core.

This package holds the decision logic behind the Book Management API:
- Field validation for create, update and identifier input
- The BookStore that owns the collection and id sequence
- Domain exceptions mapped to HTTP responses by the API layer
"""
