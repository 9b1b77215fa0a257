"""Utilities package for the Gestio application."""
