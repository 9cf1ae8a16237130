"""HTTP service and SQLite persistence for horizon graphs."""
