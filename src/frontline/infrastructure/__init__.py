"""Infrastructure layer: logger, cache and datasource backends and their managers."""
