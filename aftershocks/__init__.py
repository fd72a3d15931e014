"""Aftershock timeline: timestamp normalization, scales and beeswarm layout."""
