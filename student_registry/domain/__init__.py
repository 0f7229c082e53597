"""
Domain layer: models, interfaces and validators.
"""
