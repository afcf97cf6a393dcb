"""Version and publish workflows."""
