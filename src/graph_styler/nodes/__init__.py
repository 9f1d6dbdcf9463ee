"""Processing nodes: tag ingestion and style computation."""
