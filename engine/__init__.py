"""Engine-level configuration."""
