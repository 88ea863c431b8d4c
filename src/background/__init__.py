"""
Background processing: notification redelivery and outbox maintenance.
"""
