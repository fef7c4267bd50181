"""
Initialization.

Logging, service wiring and shutdown of the tracker process.
"""
