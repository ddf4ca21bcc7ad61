"""
File-to-file front end for the codec.

    huffpack encode input.txt output.huf
    huffpack decode output.huf restored.txt

Either path may be "-" for stdin/stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import codec


def read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def write_output(path: str, data: bytes) -> None:
    if path == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    with open(path, "wb") as f:
        f.write(data)


def status(msg: str, output: str) -> None: # keep stdout clean when the payload goes there
    print(msg, file=sys.stderr if output == "-" else sys.stdout)


def run_encode(args: argparse.Namespace) -> int:
    data = read_input(args.input)
    if not data:
        status("Input is empty. Nothing to compress.", args.output)
        write_output(args.output, b"")
        return 0

    blob = codec.encode(data)
    write_output(args.output, blob)

    ratio = len(blob) / len(data) * 100
    status(f"Encoding completed: {args.input} -> {args.output}", args.output)
    status(f"Original size: {len(data)} bytes", args.output)
    status(f"Compressed size: {len(blob)} bytes", args.output)
    status(f"Compression ratio: {ratio:.2f}%", args.output)
    return 0


def run_decode(args: argparse.Namespace) -> int:
    blob = read_input(args.input)
    data = codec.decode(blob, strict=args.strict)
    write_output(args.output, data)
    status(f"Decoding completed: {args.input} -> {args.output} ({len(data)} bytes)", args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffpack", description="Static Huffman compression for arbitrary files")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Compress INPUT into OUTPUT")
    enc.add_argument("input", help="File to compress, or - for stdin")
    enc.add_argument("output", help="Compressed file to write, or - for stdout")
    enc.set_defaults(func=run_encode)

    dec = sub.add_parser("decode", help="Decompress INPUT into OUTPUT")
    dec.add_argument("input", help="Compressed file, or - for stdin")
    dec.add_argument("output", help="File to restore into, or - for stdout")
    dec.add_argument("--strict", action="store_true",
                     help="Fail if the body ends before every symbol in the header is decoded")
    dec.set_defaults(func=run_decode)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.input != "-" and args.input == args.output:
        print("Cannot overwrite the input file, please use a different output filename.", file=sys.stderr)
        return 1

    try:
        return args.func(args)
    except (codec.HuffmanError, OSError) as e:
        print(f"{args.command.capitalize()} failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
