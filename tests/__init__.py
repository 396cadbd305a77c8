"""
Test suite for the Craving Insights service.

This package contains:
- Unit tests for the models and analytics engine
- API endpoint tests
- Regression tests
- Property-based tests
"""
