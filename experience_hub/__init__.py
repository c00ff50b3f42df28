"""ExperienceHub realtime presence and notification fan-out service."""
