"""
Service layer implementations.
"""
