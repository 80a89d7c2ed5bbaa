"""CLI interface for Trillo."""


def main() -> None:
    """Entry point for the trillo CLI."""
    from trillo_mcp.cli.app import create_app

    app = create_app()
    app()


if __name__ == "__main__":
    main()
