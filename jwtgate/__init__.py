"""
jwtgate - Bearer token authentication for FastAPI services

Issues signed, time-bounded tokens to clients with valid credentials,
verifies them on every request and allows a bounded refresh window.

Modules:
- auth: token codec, claims, gate and token service
- middleware: request gating for FastAPI applications
- api: login and refresh endpoints
"""

__version__ = "1.0.0"
