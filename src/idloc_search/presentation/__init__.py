"""
Presentation Layer - MCP server exposing the catalog flows.
"""
