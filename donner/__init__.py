"""Donner — lightning strike timing, geolocation and storm grouping."""
