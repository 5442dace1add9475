"""Data models: players, matches, rounds, configuration and standings."""
