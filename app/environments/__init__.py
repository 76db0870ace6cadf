"""
Environments Module - External Service Integrations

Architecture Overview:
======================
environments/
├── __init__.py           # Module exports
├── base.py               # Exceptions, token dataclass, abstract bases
├── google/               # Google integration (event source)
│   ├── auth/             # OAuth flow (authorization, exchange, refresh)
│   └── calendar/         # Calendar API client, schemas, HTML renderer
└── jma/                  # Japan Meteorological Agency (weather source)
    ├── client.py         # Atom feed + forecast XML fetch and parse
    ├── codes.py          # Weather code -> emoji table
    └── schemas.py        # Parsed forecast rows
"""

from app.environments.base import (
    EnvironmentProvider,
    EnvironmentError,
    AuthenticationError,
    TokenExpiredError,
    APIError,
    OAuthTokens,
)

__all__ = [
    "EnvironmentProvider",
    "EnvironmentError",
    "AuthenticationError",
    "TokenExpiredError",
    "APIError",
    "OAuthTokens",
]
