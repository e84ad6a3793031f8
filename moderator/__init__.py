"""Moderator tooling for Mafia-style social deduction games."""
