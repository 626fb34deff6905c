"""
Application framework adapters.
"""
