"""External collaborators: embedding provider and corpus index."""
