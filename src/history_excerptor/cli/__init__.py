"""CLI package for history-excerptor."""


def main() -> None:
    """CLI entrypoint for the history-excerptor console script."""
    from history_excerptor.cli.app import app

    app()
