"""Entry point for ``python -m ask_sh``."""

from ask_sh.cli import main

if __name__ == "__main__":
    main()
