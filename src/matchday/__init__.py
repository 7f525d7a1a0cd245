"""Balanced two-team lineups for informal sports events."""
