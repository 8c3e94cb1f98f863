"""
Domain layer for CineShare.
"""
