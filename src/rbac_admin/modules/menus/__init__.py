"""Menus module for the navigation catalog."""

# Module metadata
__module__ = {
    "name": "menus",
    "version": "1.0.0",
    "description": "Menu catalog administration",
    "dependencies": ["permissions"],
}
