"""
Infrastructure Layer

Adapters implementing the application ports against external services.
"""
