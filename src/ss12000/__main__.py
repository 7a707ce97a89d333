"""Script de ejecución.

Por qué existe:
- Permite ejecutar la CLI con `python -m ss12000`.
- Mantiene un entrypoint simple además del script `ss12000`.
"""

from __future__ import annotations

import sys

# Workaround for UnicodeEncodeError on Windows terminals (cp1252 vs utf-8).
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from ss12000.cli.main import run  # noqa: E402


def main() -> None:
    run()


if __name__ == "__main__":
    main()
