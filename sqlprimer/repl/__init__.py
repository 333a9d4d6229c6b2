"""Interactive shell and table formatting."""
