"""Filename resolution, extension handling and name reservation."""
