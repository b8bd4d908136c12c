"""Image decoding for the picker collaborator."""
