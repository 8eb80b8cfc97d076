"""Run the external end-to-end test runner."""
