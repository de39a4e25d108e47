"""Command handlers, one module per domain."""
