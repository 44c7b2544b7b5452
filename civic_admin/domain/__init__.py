"""Domain layer: enums, entities and exceptions."""
