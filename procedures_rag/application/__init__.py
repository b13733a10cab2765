"""Application layer: service orchestrators over the core."""
