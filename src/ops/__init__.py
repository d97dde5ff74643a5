"""
Operational helpers: logging and process signals.
"""
