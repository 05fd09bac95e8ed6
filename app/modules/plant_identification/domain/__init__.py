"""
Plant identification domain layer: models, repository contracts and services.
"""
