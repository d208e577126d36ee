"""TaleForge - generate and keep short genre-tagged stories.

Users register or log in, submit a title, free-text hints and genre tags,
and get back a templated story that is stored and listed only for them.

Quick Start:
    uvicorn taleforge.api.main:app --reload

Layers:
    core      - settings, password hashing, token service
    models    - SQLAlchemy users and stories
    services  - registration/login and story logic, transport-agnostic
    api       - FastAPI routers and the bearer-token gate
"""

__version__ = "0.1.0"
