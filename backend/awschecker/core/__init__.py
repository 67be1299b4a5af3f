"""Core infrastructure: config, logging, cancellation and lifecycle."""
