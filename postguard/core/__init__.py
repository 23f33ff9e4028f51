"""
Core: configuration, logging, errors and authorization.
"""
