"""
The data access layer. Each module wraps the queries for one model.
"""
