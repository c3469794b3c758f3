"""
Services module - collection-level operations and query fallbacks.
"""
