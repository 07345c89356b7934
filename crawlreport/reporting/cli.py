"""Command-line helper that writes the default report spreadsheet template."""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import DEFAULT_TEMPLATE_PATH
from .template import write_default_template


def main(argv: list[str] | None = None) -> int:
    """Write the default spreadsheet template.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the target exists and ``--force``
        was not given.

    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=DEFAULT_TEMPLATE_PATH,
        help=f"Where to write the template (default: {DEFAULT_TEMPLATE_PATH})",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing template",
    )
    args = parser.parse_args(argv)

    path: Path = args.path
    if path.exists() and not args.force:
        print(f"{path} already exists; pass --force to overwrite it")
        return 1

    write_default_template(path)
    print(f"wrote report template to {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
