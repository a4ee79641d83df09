"""Core runtime: chat providers."""
