"""The Command Line Interface for the utility.

Exposes key generation, public key derivation, signing, verification and fingerprinting over PEM key files.

Typical usage example:

    rsakeys keygen -P id_rsa -p id_rsa.pub
    rsakeys sign -P id_rsa --message "hello,world"
    OR
    python -m rsakeys verify -p id_rsa.pub --message "hello,world" -S <base64 signature>
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import pathlib
import sys

import rsakeys

logger = logging.getLogger("rsakeys")

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=pathlib.Path, required=True, help="Location of the public key file.")
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key", "-P", type=pathlib.Path, required=True, help="Location of the private key file.")
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message",
                      type=str,
                      required=True,
                      help="Message or path to file containing payload. If Path start with `P:`")
payloads.add_argument("--encoding",
                      "-e",
                      choices=["utf-8", "utf-16", "ascii"],
                      default="utf-8",
                      help="Payload encoding.")
minsize = argparse.ArgumentParser(add_help=False)
minsize.add_argument("--min-size",
                     type=int,
                     default=rsakeys.MIN_PUBLIC_KEY_SIZE,
                     help=f"Minimum accepted public key size (in bits). Default: {rsakeys.MIN_PUBLIC_KEY_SIZE}")
corep = argparse.ArgumentParser(prog="rsakeys")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsakeys.__version__}")
corep.add_argument("--verbose", action="store_true", help="Enable debug logging.")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands", required=True)

keygen = commands.add_parser("keygen", parents=[privkey, pubkey], help="Key generation utility.")
keygen.add_argument("--keysize", choices=["2048", "3072", "4096"], default="3072", help="Key size (in bits).")
keygen.add_argument("--pub-exponent", type=int, default=rsakeys.DEFAULT_PUBLIC_EXPONENT,
                    help=f"Exponent for the public key. Default: {rsakeys.DEFAULT_PUBLIC_EXPONENT}")
keygen.add_argument("--overwrite", "-o", action="store_true", help="Overwrite destination files if they exist.")
derive = commands.add_parser("pubkey", parents=[privkey], help="Print the public key of a private key.")
sign = commands.add_parser("sign", parents=[privkey, payloads], help="Signing utility.")
verify = commands.add_parser("verify", parents=[pubkey, payloads, minsize], help="Signature verification utility.")
verify.add_argument("--signature",
                    "-S",
                    type=str,
                    required=True,
                    help="The base64 signature to validate against the payload and public key.")
fingerprint = commands.add_parser("fingerprint", parents=[pubkey, minsize], help="Print the ID of a public key.")


def check_message(mess: str, enc: str) -> bytes:
    """Parse message for path-notice, and encode it."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding=enc) as f:
            mess = f.read()
    return mess.encode(enc)


def run(args: argparse.Namespace) -> int:
    """Executes the parsed subcommand.

    Returns:
        The process exit code.
    """
    match args.subcommand:
        case "keygen":
            if (args.private_key.exists() or args.public_key.exists()) and not args.overwrite:
                print("Destination private or public key already exists!", file=sys.stderr)
                return 1
            rpk = rsakeys.PrivateKey.generate(int(args.keysize), args.pub_exponent)
            rpk.export(args.private_key)
            rpk.public_key().export(args.public_key)
            logger.info("Key pair written to %s and %s.", args.private_key, args.public_key)
        case "pubkey":
            print(rsakeys.PrivateKey.import_key(args.private_key).public_key().to_pem(), end="")
        case "sign":
            rpk = rsakeys.PrivateKey.import_key(args.private_key)
            print(rpk.sign(check_message(args.message, args.encoding)).to_base64())
        case "verify":
            rpu = rsakeys.PublicKey.import_key(args.public_key, args.min_size)
            signature = rsakeys.Signature.from_base64(args.signature)
            if not signature.verify(rpu, check_message(args.message, args.encoding)):
                print("Signature Verification Failed!")
                return 1
            print("Signature Verified!")
        case "fingerprint":
            print(rsakeys.PublicKey.import_key(args.public_key, args.min_size).fingerprint().decode("ascii"))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Core Command Line Interface."""
    args = corep.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        code = run(args)
    except (rsakeys.RSAKeysError, OSError) as err:
        print(f"{type(err).__name__}: {err}", file=sys.stderr)
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    main()
