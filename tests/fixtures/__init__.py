"""Reusable test fixtures for envkit tests."""
