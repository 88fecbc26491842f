"""Core resolution engine: versioning primitives and dependency resolution."""
