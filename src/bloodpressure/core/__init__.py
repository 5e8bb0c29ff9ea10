"""Core configuration, logging and exception hierarchy."""
