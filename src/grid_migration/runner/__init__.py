"""Migration coordinator, transactional entry point and CLI."""
