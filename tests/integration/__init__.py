"""Integration tests against an ephemeral PostgreSQL container.

Requirements:
    pip install -e ".[test]" and a reachable Docker daemon

Usage:
    pytest -m integration
"""
