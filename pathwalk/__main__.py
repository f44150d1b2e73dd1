"""Module entrypoint for ``python -m pathwalk``.

All argument parsing happens in ``pathwalk.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
