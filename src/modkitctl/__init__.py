"""Author, test, lint, and publish a module from a local workspace."""
