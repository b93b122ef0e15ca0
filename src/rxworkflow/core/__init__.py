"""
Core infrastructure: configuration, exceptions, logging and clock.
"""
