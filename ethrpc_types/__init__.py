"""Typed models for Ethereum JSON-RPC values, with conversion to and from JSON."""

__version__ = "0.1.0"