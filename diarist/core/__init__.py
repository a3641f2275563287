"""Shared infrastructure: paths, configuration, exceptions, logging, locking."""
