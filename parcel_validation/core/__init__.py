"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Error codes, rule identifiers, threshold defaults
- exceptions: Custom exception hierarchy
"""
