#!/usr/bin/env python3
# Entry point for LSP server: python3 -m lsp

import argparse
import logging

from lsp.server import server


def main() -> None:
    parser = argparse.ArgumentParser(prog="typethis-lsp", description="typethis language server (stdio)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr at DEBUG level")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    server.start_io()


if __name__ == "__main__":
    main()
