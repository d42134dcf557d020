"""Utility helpers for the Finternet SDK."""
