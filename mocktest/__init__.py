"""Mock test session engine: question selection, answering, scoring and result submission."""
