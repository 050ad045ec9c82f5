"""External collaborators: song catalog, audio playback and score history."""
