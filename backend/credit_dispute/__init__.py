"""Credit Dispute Engine - credit report issue detection and dispute letter generation."""

__version__ = "1.0.0"
