"""Service layer wrapping the Webflow API."""
