"""Domain layer: the request/command model and parameter resolution.

This layer depends only on the standard library.
It must never import from services, infrastructure, commands, or config.
"""
