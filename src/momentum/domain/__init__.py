"""Domain value types and repository protocols."""
