"""Core data models for the LostSword toolkit."""
