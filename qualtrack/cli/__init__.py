"""QualTrack command line."""
