"""
FastAPI application surface.
"""
