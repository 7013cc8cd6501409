# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#
#    BCT - Command line tool to create keys and addresses, derive HD keys and sign transactions
#
#    © 2024 - 1200 Web Development <http://1200wd.com/>
#

import sys
import argparse
from bitcointool.main import BITCOINTOOL_VERSION, ToolError, ErrorKind
from bitcointool.config.config import DEFAULT_NETWORK, WIF_MIN_LENGTH, COMPACT_SIGNATURE_HEX_LENGTH, \
    SIGHASH_ALL
from bitcointool.ecc import EccContext, EccError
from bitcointool.encoding import EncodingError, hex_to_bytes
from bitcointool.keys import Key, HDKey, Signature, BKeyError
from bitcointool.networks import NetworkError
from bitcointool.secure import SecureBuffer
from bitcointool import keypath
from bitcointool.derivation import derive_extended_key
from bitcointool.signing import SignaturePipeline, SigningOutcome, SigningError

PKEY_ERROR = "Missing extended key (use -p)"


# Show all errors in simple format without tracelog
def exception_handler(exception_type, exception, traceback):
    print("%s: %s" % (exception_type.__name__, exception))


sys.excepthook = exception_handler


class ToolArgumentParser(argparse.ArgumentParser):
    """
    Argument parser which reports errors in the same format as the commands, on standard output with exit code 1
    """

    def error(self, message):
        print("Error: %s" % message)
        self.print_usage(sys.stdout)
        sys.exit(1)


def print_version():
    print("Version: bitcointool %s" % BITCOINTOOL_VERSION)


def parse_args(args=None):
    parser = ToolArgumentParser(
        prog='bitcointool', add_help=False,
        description='BitcoinTool - create keys and addresses, derive HD keys and sign transaction inputs',
        epilog="Available commands: pubfrompriv (requires -p WIF), addrfrompub (requires -k HEX), genkey, "
               "hdgenmaster, hdprintkey (requires -p), hdderive (requires -m and -p), sign (requires -x and -s), "
               "comp2der (requires -s), bip32maintotest (requires -p)")
    parser.add_argument('--help', action='help', help="Show this help message and exit")
    parser.add_argument('--command', '-c', help="Command to run")
    parser.add_argument('--privkey', '-p', help="Private key in WIF format or extended key")
    parser.add_argument('--pubkey', '-k', help="Public key in hexadecimal format")
    parser.add_argument('--keypath', '-m',
                        help="BIP32 key path, i.e. m/0'/1. Use a range like m/0'/[0-9] to derive multiple keys")
    parser.add_argument('--txhex', '-x', help="Raw transaction in hexadecimal format")
    parser.add_argument('--scripthex', '-s',
                        help="Locking script of output to spend in hex, or compact signature for comp2der")
    parser.add_argument('--inputindex', '-i', type=int, default=0, help="Index of input to sign, default is 0")
    parser.add_argument('--sighashtype', '-h', type=int, default=SIGHASH_ALL,
                        help="Sighash type, default is %d (SIGHASH_ALL)" % SIGHASH_ALL)
    parser.add_argument('--amount', '-a', type=int, default=0,
                        help="Value in satoshi of output spent, required for segwit inputs")
    parser.add_argument('--mainnet', action='store_const', dest='network', const='bitcoin',
                        help="Use bitcoin main network")
    parser.add_argument('--testnet', '-t', action='store_const', dest='network', const='testnet',
                        help="Use bitcoin test network")
    parser.add_argument('--regtest', '-r', action='store_const', dest='network', const='regtest',
                        help="Use bitcoin regression test network")
    parser.add_argument('--version', '-v', action='store_true', help="Show version and exit")
    parser.set_defaults(network=DEFAULT_NETWORK)
    return parser, parser.parse_args(args)


def print_node(hdkey):
    print("ext key: %s" % hdkey.wif())
    if hdkey.is_private:
        print("privatekey WIF: %s" % hdkey.wif_key())
    print("depth: %d" % hdkey.depth)
    print("child index: %d" % hdkey.child_index)
    print("p2pkh address: %s" % hdkey.address_p2pkh())
    print("pubkey hex: %s" % hdkey.public_hex)
    print("extended pubkey: %s" % hdkey.wif_public())


def print_addresses(key, include_p2wpkh=True):
    print("p2pkh address: %s" % key.address_p2pkh())
    print("p2sh-p2wpkh address: %s" % key.address_p2sh_p2wpkh())
    if include_p2wpkh:
        print("p2wpkh (bc1 / bech32) address: %s" % key.address_p2wpkh())


def _parse_extended_key(args, ecc):
    if not args.privkey:
        raise ToolError(ErrorKind.MISSING_ARGUMENT, PKEY_ERROR)
    with SecureBuffer(args.privkey) as extkey:
        try:
            return HDKey.parse(extkey.text(), ecc, args.network)
        except BKeyError:
            raise ToolError(ErrorKind.OPERATION_FAILED, "Failed. Probably invalid extended key.")


def cmd_pubfrompriv(args, ecc):
    if not args.privkey:
        raise ToolError(ErrorKind.MISSING_ARGUMENT, "Missing private key (use -p)")
    with SecureBuffer(args.privkey) as wif:
        try:
            key = Key.from_wif(wif.text(), ecc, args.network)
        except BKeyError:
            raise ToolError(ErrorKind.OPERATION_FAILED, "Operation failed")
    with key:
        print("pubkey: %s" % key.public_compressed_byte.hex())
        print_addresses(key)


def cmd_addrfrompub(args, ecc):
    if not args.pubkey:
        raise ToolError(ErrorKind.MISSING_ARGUMENT, "Missing public key (use -k)")
    try:
        key = Key.from_public_hex(args.pubkey, ecc, args.network)
    except BKeyError:
        raise ToolError(ErrorKind.INVALID_PUBLIC_KEY, "Operation failed, invalid pubkey")
    print_addresses(key)


def cmd_genkey(args, ecc):
    with Key.generate(ecc, args.network) as key:
        print("privatekey WIF: %s" % key.wif())
        print("privatekey HEX: %s" % key.private_hex)


def cmd_hdgenmaster(args, ecc):
    with HDKey.generate(ecc, args.network) as masterkey:
        print("masterkey: %s" % masterkey.wif_private())


def cmd_hdprintkey(args, ecc):
    with _parse_extended_key(args, ecc) as hdkey:
        print_node(hdkey)


def cmd_hdderive(args, ecc):
    if not args.privkey:
        raise ToolError(ErrorKind.MISSING_ARGUMENT, PKEY_ERROR)
    if not args.keypath:
        raise ToolError(ErrorKind.MISSING_ARGUMENT, "Missing keypath (use -m)")
    failed = 0
    with SecureBuffer(args.privkey) as extkey:
        for result in derive_extended_key(extkey.text(), keypath.expand(args.keypath), ecc, args.network):
            if not result.ok:
                print("Error: %s (%s)" % (result.error, result.path))
                failed += 1
                continue
            with result.key:
                print_node(result.key)
    if failed:
        raise ToolError(ErrorKind.DERIVATION_FAILED, "Deriving %d child key(s) failed" % failed)


def print_sighash(report):
    print("script: %s" % report.script)
    print("script-type: %s" % report.script_type)
    print("inputindex: %d" % report.input_index)
    print("sighashtype: %d" % report.hash_type)
    print("hash: %s" % report.sighash_hex)


def cmd_sign(args, ecc):
    pipeline = SignaturePipeline(ecc, args.network)
    try:
        report = pipeline.run(args.txhex, args.scripthex, args.inputindex, args.sighashtype, args.amount,
                              wif=SecureBuffer(args.privkey or ''))
    except SigningError as e:
        print_sighash(e.report)
        raise
    print_sighash(report)
    if report.outcome == SigningOutcome.SKIPPED:
        print("No private key provided, signing will not happen")
        return
    if report.outcome == SigningOutcome.FAILED:
        print("!!!Sign error:%s" % report.sign_result)
    if report.signature_compact is not None:
        print("\nSignature created:")
        print("signature compact: %s" % report.signature_compact.hex())
        print("signature DER (+hashtype): %s" % report.signature_der.hex())
    print("signed TX: %s" % report.signed_tx_hex)


def cmd_comp2der(args, ecc):
    if not args.scripthex or len(args.scripthex) != COMPACT_SIGNATURE_HEX_LENGTH:
        raise ToolError(ErrorKind.MISSING_ARGUMENT,
                        "Missing signature or invalid length (use hex, 128 chars == 64 bytes)")
    print(args.scripthex)
    try:
        sig = Signature.parse_compact(hex_to_bytes(args.scripthex))
    except EncodingError:
        raise ToolError(ErrorKind.INVALID_ENCODING, "Invalid compact signature hex")
    except BKeyError:
        raise ToolError(ErrorKind.OPERATION_FAILED, "Invalid compact signature, r or s out of range")
    print("DER: %s" % sig.normalized().as_der_encoded(ecc, include_hash_type=False).hex())


def cmd_bip32maintotest(args, ecc):
    with _parse_extended_key(args, ecc) as hdkey:
        if hdkey.is_private:
            print("xpriv: %s" % hdkey.wif_private(network='testnet'))
        print("xpub: %s" % hdkey.wif_public(network='testnet'))


COMMANDS = {
    'pubfrompriv': cmd_pubfrompriv,
    'addrfrompub': cmd_addrfrompub,
    'p2pkhaddrfrompub': cmd_addrfrompub,
    'genkey': cmd_genkey,
    'hdgenmaster': cmd_hdgenmaster,
    'hdprintkey': cmd_hdprintkey,
    'hdderive': cmd_hdderive,
    'sign': cmd_sign,
    'comp2der': cmd_comp2der,
    'bip32maintotest': cmd_bip32maintotest,
}


def main(args=None):
    parser, args = parse_args(args)
    if args.version:
        print_version()
        sys.exit(0)
    if args.privkey is not None and len(args.privkey) < WIF_MIN_LENGTH:
        print("Error: Private key must be WIF encoded")
        sys.exit(1)
    if not args.command:
        print_version()
        parser.print_help(sys.stdout)
        sys.exit(1)
    command = COMMANDS.get(args.command)
    if command is None:
        print("Error: Unknown command '%s'" % args.command)
        sys.exit(1)

    try:
        with EccContext() as ecc:
            command(args, ecc)
    except ToolError as e:
        print("Error: %s" % e)
        sys.exit(1)
    except (BKeyError, EncodingError, NetworkError, EccError) as e:
        print("Error: Operation failed: %s" % e)
        sys.exit(1)


if __name__ == '__main__':
    main()
