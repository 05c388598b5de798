"""Rolegate - role-based access control with inherited role permissions."""

__version__ = "0.1.0"
