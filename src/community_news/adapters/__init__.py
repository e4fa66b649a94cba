"""Adapters for feeds, images and article pages."""
