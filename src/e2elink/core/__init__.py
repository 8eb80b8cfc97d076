"""Core composition engine for e2elink."""
