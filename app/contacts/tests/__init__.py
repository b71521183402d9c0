"""
Tests for contacts app.
"""
