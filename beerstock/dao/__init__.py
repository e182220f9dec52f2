"""Data-access objects — one per table, all async."""
