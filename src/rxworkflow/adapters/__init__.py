"""
Adapters: persistence implementations of the application ports.
"""
