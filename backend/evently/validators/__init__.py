"""
Normalization and validation pipelines run by the services layer before each write.
"""
