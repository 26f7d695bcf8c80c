"""Core runtime models.

This package holds configuration, constants, errors, logging setup,
and the typed settings models shared by the storage layer.
"""
