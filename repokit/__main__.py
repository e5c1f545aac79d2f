"""Entry point for running RepoKit as a module."""

from repokit.cli import app


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
