"""HTTP API for the Mini CRM."""
