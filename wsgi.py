#!/usr/bin/env python3
"""
WSGI entry point for the Craving Insights service.
This file is used by uWSGI/gunicorn to serve the Flask application.
"""

from app import create_app

# Create the Flask application instance
application = create_app()

if __name__ == "__main__":
    application.run()
