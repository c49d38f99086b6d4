"""Infrastructure adapters for the food analysis context."""
