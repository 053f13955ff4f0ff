"""Helpers shared by the core and the client facade."""
