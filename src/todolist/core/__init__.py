"""Core services and cross-cutting concerns.

Subpackages are imported directly (``todolist.core.auth``,
``todolist.core.tenancy`` ...) so that feature modules can depend on
them without pulling in the whole tree.
"""
