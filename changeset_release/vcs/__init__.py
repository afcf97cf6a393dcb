"""Version control helpers."""
