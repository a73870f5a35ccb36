"""Core configuration, errors, logging, and shared types."""
