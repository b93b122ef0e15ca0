"""
Domain layer: enums, value objects, entities and errors.
"""
