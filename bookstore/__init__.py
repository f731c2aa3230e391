"""
Book Store API.

CRUD backend for books and authors with bearer-token authentication.
"""

__version__ = "1.0.0"
