"""Birdboard: daily species counts and dashboard API for a BirdWeather station."""
