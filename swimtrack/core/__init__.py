"""
Core business logic for swim session tracking.

This module is framework-agnostic - it doesn't import file parsing libraries,
configuration, or any I/O concerns. Everything here operates on values that
have already been read and decoded, so it can be tested in isolation.
"""
