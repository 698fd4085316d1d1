# backend/learnhub/core/__init__.py
"""Configuration, logging, error taxonomy and shared constants."""
