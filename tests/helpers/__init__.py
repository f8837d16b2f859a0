"""Shared testing helpers and fixtures for the customers test suite."""
