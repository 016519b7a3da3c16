"""Product catalog: models, queries and listing panels."""
