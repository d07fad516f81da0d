"""
Test suite for Catalog Sync.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_update_service.py -v
"""
