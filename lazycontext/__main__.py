"""Module entrypoint for ``python -m lazycontext``."""

from .cli import main


if __name__ == "__main__":
    main()
