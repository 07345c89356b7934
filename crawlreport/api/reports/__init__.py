"""Report resources for the crawlreport HTTP API."""
