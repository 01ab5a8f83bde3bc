#!/usr/bin/env python3
"""Small CLI to decrypt and decode a save file and print its entries.

Usage: python3 scripts/inspect_save.py data/saves/slot1.json.encrypted --password secret

Files written with the per-process default key (encryption without a
password) cannot be inspected: that key is gone once the writer exits.
"""

from __future__ import annotations

import argparse
import json
import os
import pprint
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from savebox_lib.crypto.aes_provider import AesEncryptionProvider  # noqa: E402
from savebox_lib.errors import EnvelopeDecodeError  # noqa: E402
from savebox_lib.serialization import DictionaryHandler, TypeHandlerRegistry  # noqa: E402
from savebox_lib.settings import ENCRYPTED_SUFFIX  # noqa: E402


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Decrypt and decode a save file and show its entries")
    p.add_argument("path", help="Path to the save file")
    p.add_argument("-p", "--password", default="", help="Password the file was encrypted with")
    p.add_argument(
        "-e", "--encrypted", action="store_true",
        help=f"Treat the file as encrypted even without the {ENCRYPTED_SUFFIX} suffix",
    )
    p.add_argument("-j", "--json", action="store_true", help="Print entries as JSON (values via str on failure)")
    p.add_argument("-r", "--raw", action="store_true", help="Print the decrypted envelope text and exit")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    path = args.path

    if not os.path.exists(path):
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 2

    with open(path, "r", encoding="utf-8") as fh:
        text = fh.read()

    if args.encrypted or path.endswith(ENCRYPTED_SUFFIX):
        if not args.password:
            print("Error: encrypted files need --password", file=sys.stderr)
            return 2
        text = AesEncryptionProvider().decrypt(text, args.password)

    if args.raw:
        print(text)
        return 0

    try:
        entries = DictionaryHandler(TypeHandlerRegistry()).decode(text)
    except EnvelopeDecodeError as exc:
        print(f"Failed to decode '{path}': {exc} (wrong password?)", file=sys.stderr)
        return 3

    if args.json:
        print(json.dumps(entries, indent=2, default=str))
    else:
        print(pprint.pformat(entries, width=120))
    print(f"{len(entries)} entries", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
