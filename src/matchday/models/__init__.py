"""Canonical models shared across ingestion, balancing and storage."""

from .player import RatingEntry, RosterPlayer, RsvpEntry

__all__ = ["RatingEntry", "RosterPlayer", "RsvpEntry"]
