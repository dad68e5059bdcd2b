"""Todos module - to-do items and lists owned by users."""

# Module metadata
__module_info__ = {
    "name": "todos",
    "version": "1.0.0",
    "description": "To-do items, lists, date windows and statistics",
    "dependencies": ["tenants", "users"],
}
