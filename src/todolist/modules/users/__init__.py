"""Users module - profiles and tenant user administration."""

# Module metadata
__module_info__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "User profiles and tenant user administration",
    "dependencies": ["tenants"],
}
