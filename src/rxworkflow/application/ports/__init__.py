"""
Ports: repository and external service interfaces.
"""
