"""HTTP surface of the Portfolio CMS API."""
