"""
Application Layer - catalog search flows and their pure components.
"""
