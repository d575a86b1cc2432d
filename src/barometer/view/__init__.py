"""Rendering of simulation records with matplotlib."""
