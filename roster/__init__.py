"""Roster API: players behind username/password auth with JWT access and refresh tokens."""
