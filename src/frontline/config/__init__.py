"""Configuration layer: TOML models, unified settings, discovery and logging setup."""
