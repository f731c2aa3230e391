"""
Service layer: unit of work, generic CRUD services and the auth gateway.
"""
