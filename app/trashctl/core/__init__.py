"""Core infrastructure: paths, configuration, errors, theme and UI seam."""
