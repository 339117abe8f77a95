#!/usr/bin/env python3
"""
ECB byte-at-a-time attack - command line

Usage:
  ecbattack demo [-k KEY_HEX] [-a ATTACKER_INPUT] [-c {aes,des}] [-w N] [--budget N] [--progress] UNKNOWN
  ecbattack serve [--host H] [--port P] [-c {aes,des}] [-a PREFIX] SECRET
  ecbattack attack URL [-w N] [--budget N] [--progress]
"""

import argparse
import logging
import sys

import requests
from Crypto.Random import get_random_bytes

from .config import DEFAULT_CIPHER, HOST, PORT, AttackConfig
from .demo import run_ecb_demo
from .errors import ECBAttackError
from .oracle import CIPHERS, EcbOracle, block_size_of
from .remote import RemoteOracle
from .runner import attack
from .server import create_app


def parse_key(s: str) -> bytes:
    try:
        return bytes.fromhex(s.strip().removeprefix("0x"))
    except ValueError:
        raise argparse.ArgumentTypeError("key must be hex (e.g. 00112233...)") from None


def show_secret(recovered: bytes) -> str:
    try:
        return recovered.decode()
    except UnicodeDecodeError:
        return repr(recovered)


def add_attack_options(p):
    p.add_argument("-w", "--workers", type=int, default=1, help="Threads for dictionary queries (default 1)")
    p.add_argument("--budget", type=int, default=None, help="Maximum number of oracle queries")
    p.add_argument("--progress", action="store_true", help="Show a progress bar")


def build_argparser():
    p = argparse.ArgumentParser(prog="ecbattack", description="ECB byte-at-a-time secret recovery.")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo", help="Attack a local oracle holding UNKNOWN.")
    demo.add_argument("unknown", help="Secret suffix appended by the oracle")
    demo.add_argument("-k", "--key", type=parse_key, default=None, help="Key in hex (default: random)")
    demo.add_argument("-a", "--attacker-input", default="", help="Fixed text placed before every query")
    demo.add_argument("-c", "--cipher", choices=sorted(CIPHERS), default=DEFAULT_CIPHER)
    add_attack_options(demo)

    serve = sub.add_parser("serve", help="Serve an ECB oracle over HTTP.")
    serve.add_argument("secret", help="Secret suffix appended to every query")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)
    serve.add_argument("-a", "--prefix", default="", help="Fixed text placed before every query")
    serve.add_argument("-c", "--cipher", choices=sorted(CIPHERS), default=DEFAULT_CIPHER)

    remote = sub.add_parser("attack", help="Attack an oracle served by 'ecbattack serve'.")
    remote.add_argument("url", help="Base URL, e.g. http://localhost:1337")
    add_attack_options(remote)
    return p


def config_from_args(args) -> AttackConfig:
    return AttackConfig(query_budget=args.budget, workers=args.workers, progress=args.progress)


def cmd_demo(args) -> int:
    key = args.key if args.key is not None else get_random_bytes(block_size_of(args.cipher))
    print("[*] Starting ECB byte-at-a-time demo...")
    result = run_ecb_demo(key, args.attacker_input, args.unknown,
                          cipher=args.cipher, config=config_from_args(args))
    for step in result.steps:
        print(f"    {step}")
    print(f"\n[+] Ciphertext: {result.ciphertext.hex()}")
    print(f"[+] Recovered : {show_secret(result.recovered)}")
    if not result.complete:
        print("[-] Recovery stopped early")
    return 0


def cmd_serve(args) -> int:
    key = get_random_bytes(block_size_of(args.cipher))
    oracle = EcbOracle(key, args.secret.encode(), prefix=args.prefix.encode(), cipher=args.cipher)
    print(f"[*] ECB Oracle Server ({args.cipher}) on http://{args.host}:{args.port}")
    create_app(oracle).run(host=args.host, port=args.port)
    return 0


def cmd_attack(args) -> int:
    print(f"[*] Attacking {args.url}...")
    with RemoteOracle(args.url) as oracle:
        result = attack(oracle, config_from_args(args))
    print(f"[+] Block size: {result.block_size} bytes")
    print(f"[+] Secret length: {result.secret_length} bytes")
    print(f"[+] Recovered ({result.queries} queries): {show_secret(result.recovered)}")
    if not result.complete:
        print("[-] Recovery stopped early")
    return 0


COMMANDS = {
    "demo": cmd_demo,
    "serve": cmd_serve,
    "attack": cmd_attack,
}


def main(argv=None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        return COMMANDS[args.cmd](args)
    except (ECBAttackError, ValueError) as e:
        print(f"[!] Error: {e}")
        return 1
    except requests.RequestException as e:
        print(f"[!] Oracle request failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n[!] Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
