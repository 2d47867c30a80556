"""Storage core: identity codec, chunk repository, assembly and retrieval."""
