"""Test data factories and persistence helpers."""
