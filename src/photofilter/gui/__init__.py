"""Qt controllers and background tasks driving the pipeline."""
