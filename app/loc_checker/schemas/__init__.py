"""Marshmallow schemas for configuration and report payloads."""
