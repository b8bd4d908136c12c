"""Core image pipeline: bitmaps, parameters, scaling and filtering."""
