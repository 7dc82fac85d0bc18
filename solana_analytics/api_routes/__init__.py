"""REST API routes for Solana Analytics."""
