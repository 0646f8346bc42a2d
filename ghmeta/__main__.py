"""Module entrypoint for `python -m ghmeta`.

Forwards to the same main() function as the `ghmeta` console script.

Usage:
    ```bash
    python -m ghmeta show scilus/tractoflow --detailed
    ```
"""

from .cli import main

if __name__ == "__main__":
    main()
