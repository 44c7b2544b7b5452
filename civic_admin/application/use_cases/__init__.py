"""Use cases (application services orchestrating repositories)."""
