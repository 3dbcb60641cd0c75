"""Groups module for managing permission groups."""

# Module metadata
__module__ = {
    "name": "groups",
    "version": "1.0.0",
    "description": "Group administration and permission assignment",
    "dependencies": ["permissions"],
}
