"""Shared utilities for e2elink core."""
