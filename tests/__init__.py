"""
Tests Package - Unit Tests

Test structure:
- tests/conftest.py - Shared fixtures (settings, mocked registry API, payload builders)
- tests/test_*.py - One module per component

The registry API is never contacted: every request goes through aioresponses.
"""
