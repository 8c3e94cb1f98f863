"""
Presentation layer: HTTP routes, WebSocket endpoint and schemas.
"""
