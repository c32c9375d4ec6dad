"""Domain records and repository interfaces."""
