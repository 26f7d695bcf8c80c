"""Storage layer.

This package persists tables as directories and records as YAML files.
It owns settings, id allocation, CRUD, and the select pipeline.
"""
