"""
Core utilities — error kinds and exceptions shared by the pipeline and API server.
"""
