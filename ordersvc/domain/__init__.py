"""Domain entities, request shapes and filters."""
