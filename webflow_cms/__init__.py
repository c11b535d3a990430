"""Webflow CMS Manager - admin backend and proxy for the Webflow CMS API."""

__version__ = "1.0.0"
