"""Shared helpers for the e2elink test suite."""
