"""Filter design and resampling engine."""
