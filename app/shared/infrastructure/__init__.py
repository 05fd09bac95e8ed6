"""
Infrastructure layer package for the nursery identification service.
Provides database connections, image storage, and external API clients.
"""
