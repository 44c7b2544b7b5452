"""Firestore REST data layer."""
