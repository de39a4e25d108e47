"""Domain layer: song library and playback."""
