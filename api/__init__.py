"""Request/response schemas and cached table loading for callers of the recommender."""
