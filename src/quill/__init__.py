"""Quill - headless CMS backend with an admin API and a public content API."""

__version__ = "0.1.0"
