"""Script de ejecución.

Por qué existe:
- Permite ejecutar `python -m main` desde `src/` durante desarrollo.
- Mantiene un entrypoint simple además del script `domain-scout` instalado.
"""

from __future__ import annotations

import sys

# Workaround for UnicodeEncodeError on Windows terminals (cp1252 vs utf-8);
# Rich tables and the banner print non-ASCII characters.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run  # noqa: E402


def main() -> None:
    run()


if __name__ == "__main__":
    main()
