"""Protocol connectors.

Each connector knows one wire protocol: how to recognize its responses,
how to read replay context from its requests, and how to build replay
requests. The runtime layer stays protocol-agnostic.
"""
