"""Entry point for the Ristretto CLI when run as ``python -m ristretto``."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
