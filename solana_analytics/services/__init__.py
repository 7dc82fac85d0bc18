"""Services for Solana Analytics."""
