"""Allow `python -m gamecode`."""

from gamecode.cli import app

if __name__ == "__main__":
    app()
