"""Users module for user accounts and group membership."""

# Module metadata
__module__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "User administration and group membership",
    "dependencies": ["groups"],
}
