"""HTTP middleware for the Webflow CMS Manager."""
