"""Mini CRM core package: contacts, users and the document store they live in."""

__version__ = "0.1.0"
