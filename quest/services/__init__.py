"""Default catalog collaborators for the Population Engine."""
