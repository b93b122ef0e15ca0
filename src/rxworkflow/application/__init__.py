"""
Application layer: workflow services, ports and use cases.
"""
