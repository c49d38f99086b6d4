"""Application layer for the food analysis context."""
