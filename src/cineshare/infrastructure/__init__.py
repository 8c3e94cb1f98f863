"""
Infrastructure layer for CineShare.
"""
