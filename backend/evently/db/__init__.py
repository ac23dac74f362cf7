"""
Database layer: declarative base, engine/session handle and the connection cache.
"""
