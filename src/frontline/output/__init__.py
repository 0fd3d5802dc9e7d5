"""Output layer: human, quiet and JSON renderings of dispatch results."""
