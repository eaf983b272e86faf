"""Application services for Faceoff."""
