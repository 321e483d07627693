"""MoodReel REST API."""
