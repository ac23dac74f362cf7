"""
Data-access functions: each create/update runs its pipeline, then flushes.
"""
