"""Command-line entry point for Solana Analytics."""

from solana_analytics.server import run_server


def main():
    """Run the Solana Analytics server."""
    run_server()


if __name__ == "__main__":
    main()
