"""
Core infrastructure: settings, logging, middleware and database.
"""
