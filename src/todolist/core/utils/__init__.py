"""Shared helpers."""

from todolist.core.utils.text import suggest_subdomain


__all__ = ["suggest_subdomain"]
