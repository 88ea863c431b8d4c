"""
Domain package: entities, events, exceptions and value objects.
"""
