"""Cross-cutting infrastructure: database and logging."""
