"""
Infrastructure Layer - HTTP clients for external data sources.
"""
