"""Permissions module for managing the permission catalog."""

# Module metadata
__module__ = {
    "name": "permissions",
    "version": "1.0.0",
    "description": "Permission catalog administration",
    "dependencies": [],
}
