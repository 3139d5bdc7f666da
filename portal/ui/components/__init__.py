"""Reusable widgets shared by the portal views."""
