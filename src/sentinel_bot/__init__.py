"""Sentinel: Discord slash commands for GitHub repositories."""
