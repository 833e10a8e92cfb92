"""cmdflow CLI bootstrap."""

from cmdflow.cli import app

if __name__ == "__main__":
    app()
