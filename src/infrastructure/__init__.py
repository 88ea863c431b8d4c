"""
Infrastructure package: SQL and in-memory stores, monitoring.
"""
