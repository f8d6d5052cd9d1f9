"""
Pneuma - network layer for praxis.

Manifest retrieval, action endpoint requests, and a JSON-RPC chain
client, all over httpx.
"""
