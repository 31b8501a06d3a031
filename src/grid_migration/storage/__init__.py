"""Favorites store, table reader/writer and YAML layout documents."""
