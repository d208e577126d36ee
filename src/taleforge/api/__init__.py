"""FastAPI application and REST API endpoints.

This module contains:
- Main FastAPI application configuration
- Bearer-token authentication gate
- Registration and login endpoints
- Story generation and listing endpoints
"""
