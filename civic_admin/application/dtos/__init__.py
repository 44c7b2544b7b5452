"""Data transfer objects for use cases."""
