"""
Search API Typesense - status service
"""

from search_api_typesense.core.factory import create_app

app = create_app()
