"""
Manifest data model, structural schema, normalization and binding.
"""
