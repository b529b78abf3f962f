"""
Domain Layer - value objects for id.loc.gov records.
"""
