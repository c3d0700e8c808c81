"""Shared helpers: logging, configuration and workspace discovery."""
