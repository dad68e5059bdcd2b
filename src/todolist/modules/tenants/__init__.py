"""Tenants module - Multi-tenancy support."""

# Module metadata
__module_info__ = {
    "name": "tenants",
    "version": "1.0.0",
    "description": "Tenant directory and administration",
    "dependencies": [],
}
