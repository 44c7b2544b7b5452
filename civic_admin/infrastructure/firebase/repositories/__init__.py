"""Firestore-backed repositories (implement application ports)."""
