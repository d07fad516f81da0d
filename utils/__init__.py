"""
Shared helpers: text normalization and pipeline table files.
"""
