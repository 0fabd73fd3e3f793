"""Application services composing domain rules with persistence."""
