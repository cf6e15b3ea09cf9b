"""Analysis engine and data models."""
