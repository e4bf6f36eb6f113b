"""
Server modules for the Travel Spots application.

This package contains FastAPI router modules for the spot, selection and
geocoding endpoints, plus the SSE broadcasting that drives connected maps.
"""
