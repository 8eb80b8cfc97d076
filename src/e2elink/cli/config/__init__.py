"""Inspect e2elink configuration."""
