"""
API 層：HTTP 與 WebSocket endpoints
"""
