"""
HTTP API for the match analytics service.
"""
