"""
Search API Typesense backend
"""
