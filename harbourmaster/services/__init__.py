"""Services for harbourmaster."""
