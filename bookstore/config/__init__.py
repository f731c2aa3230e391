"""
Configuration package for the book store API.
"""

from bookstore.config.settings import Settings, get_settings

__all__ = ['Settings', 'get_settings']
