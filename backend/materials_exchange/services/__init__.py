"""
Materials Exchange Services
Catalog engine, record store adapter, ingestion and annotations
"""
