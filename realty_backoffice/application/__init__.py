"""Application layer: request schemas and use-case services."""
