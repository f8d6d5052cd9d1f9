"""
Sigil - wallet sessions and signing.
"""
