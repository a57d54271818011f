"""Userhub: user management API with JWT cookie sessions and role-based access control."""
