"""INTERLIS transfer file validation runner."""
