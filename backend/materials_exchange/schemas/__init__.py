"""
Pydantic schemas for the HTTP API
"""
