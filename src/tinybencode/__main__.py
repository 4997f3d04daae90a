#!/usr/bin/env python3

import logging
from argparse import ArgumentParser, ArgumentTypeError
from sys import argv, exit

from tinybencode.bencode import (
    BDecoder,
    default_max_depth,
    duplicate_key_policies,
    encode,
    max_depth_limit,
)
from tinybencode.exception import BEncodingError


def depth(text):
    value = int(text)
    if value < 0 or value > max_depth_limit():
        raise ArgumentTypeError(
            "must be between 0 and %d: %s" % (max_depth_limit(), text)
        )
    return value


def main(command_line=argv[1:]):
    parser = ArgumentParser(
        prog="tinybencode", description="Decode and show a bencoded file"
    )
    parser.add_argument("file")
    parser.add_argument("--strict", action="store_true")
    parser.add_argument(
        "--max-depth", type=depth, default=min(default_max_depth, max_depth_limit())
    )
    parser.add_argument(
        "--duplicate-keys", choices=duplicate_key_policies, default="reject"
    )
    parser.add_argument("--canonical-check", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(command_line)

    logging.basicConfig()
    log = logging.getLogger()
    log.setLevel(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        with open(args.file, "rb") as f:
            data = f.read()
    except OSError as e:
        log.error("unable to read %s: %s" % (args.file, e))
        return 1

    decoder = BDecoder(
        {
            "max_depth": args.max_depth,
            "strict": args.strict,
            "duplicate_keys": args.duplicate_keys,
        }
    )
    try:
        value = decoder.decode_one(data)
    except BEncodingError as e:
        log.error(
            "invalid bencoded data in %s: %s: %s"
            % (args.file, e.__class__.__name__, e)
        )
        return 1

    print(value)
    if args.canonical_check:
        if encode(value) != data:
            log.error("%s is not in canonical form" % args.file)
            return 1
        log.info("%s is in canonical form" % args.file)
    return 0


if __name__ == "__main__":
    exit(main())
