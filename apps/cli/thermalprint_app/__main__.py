from __future__ import annotations

import sys

from thermalprint_app.cli import main as _cli_main


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    # Bare invocation shows the effective settings.
    return int(_cli_main(args or ["config"]))


if __name__ == "__main__":
    raise SystemExit(main())
