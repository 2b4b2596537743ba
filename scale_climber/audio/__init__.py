"""Audio capture and playback collaborators for Scale Climber."""
