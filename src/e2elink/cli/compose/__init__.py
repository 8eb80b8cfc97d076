"""Compose test assets across the workspace module graph."""
