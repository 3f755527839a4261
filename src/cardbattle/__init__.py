"""Asynchronous two-player trading card battles.

The battle engine lives in :mod:`cardbattle.domain`; storage adapters,
services and the HTTP transport are layered around it.
"""

__version__ = "0.1.0"
