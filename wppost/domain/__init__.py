"""
Domain layer - post records, value types and domain errors.

This layer is independent of the host that stores the records.
"""
