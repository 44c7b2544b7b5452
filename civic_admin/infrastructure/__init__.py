"""Infrastructure layer: document store, external APIs, security."""
