"""
Theurgy - command implementations for the praxis CLI.

Each module corresponds to a top-level CLI command:
- show: Resolve a manifest and print its layout
- run:  Execute one action through the wallet
"""
