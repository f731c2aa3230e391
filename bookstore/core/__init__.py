"""
Core infrastructure: exceptions, logging and middleware.
"""
