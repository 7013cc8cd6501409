# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    ENCODING - Methods for encoding and conversion
#    © 2024 - 1200 Web Development <http://1200wd.com/>
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Affero General Public License as
#    published by the Free Software Foundation, either version 3 of the
#    License, or (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU Affero General Public License for more details.
#
#    You should have received a copy of the GNU Affero General Public License
#    along with this program.  If not, see <http://www.gnu.org/licenses/>.
#


import numbers
import hashlib
from Crypto.Hash import RIPEMD160
from bitcointool.main import *

_logger = logging.getLogger(__name__)

HEX_CHARACTERS = '0123456789abcdefABCDEF'
BASE58_CHARACTERS = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
BECH32_CHARACTERS = 'qpzry9x8gf2tvdw0s3jn54khce6mua7l'
BECH32_GENERATOR = [0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3]


class EncodingError(Exception):
    """
    Raised when data cannot be encoded or decoded, the error is logged
    """
    def __init__(self, msg=''):
        self.msg = msg
        _logger.error(msg)

    def __str__(self):
        return self.msg


def _codestring_to_array(codestring, alphabet):
    """
    Positions of the characters of codestring in alphabet. Raises an EncodingError for unknown characters.

    :return list of int:
    """
    array = []
    for ch in codestring:
        pos = alphabet.find(ch)
        if pos < 0:
            raise EncodingError("Character '%s' not found in codebase" % ch)
        array.append(pos)
    return array


def hex_to_bytes(hexstring):
    """
    Strictly convert a hexadecimal string to bytes. Odd length strings and any character which is not a
    hexadecimal digit, including whitespace, raise an EncodingError.

    >>> hex_to_bytes('00ff')
    b'\\x00\\xff'

    :param hexstring: Hexadecimal string, upper or lower case
    :type hexstring: str, bytes

    :return bytes:
    """
    if isinstance(hexstring, bytes):
        try:
            hexstring = hexstring.decode('ascii')
        except UnicodeDecodeError:
            raise EncodingError("Hexadecimal input contains non-ascii characters")
    if not isinstance(hexstring, str):
        raise EncodingError("Hexadecimal string expected, got %s" % type(hexstring).__name__)
    if len(hexstring) % 2:
        raise EncodingError("Hexadecimal string must have an even number of characters")
    if any(c not in HEX_CHARACTERS for c in hexstring):
        raise EncodingError("Invalid hexadecimal string")
    return bytes.fromhex(hexstring)


def _as_bytes(data):
    return hex_to_bytes(data) if isinstance(data, str) else bytes(data)


def reversed_hex(data):
    """
    Hexadecimal representation of data in reversed byte order, as used to display hashes and transaction IDs.

    >>> reversed_hex(b'\\x01\\x02\\x03')
    '030201'

    :param data: Bytes in computation order
    :type data: bytes

    :return str:
    """
    return bytes(data)[::-1].hex()


def base58_encode(data):
    """
    Encode bytes with the Base58 alphabet, every leading zero byte becomes a '1'

    :param data: Bytes to encode
    :type data: bytes

    :return str:
    """
    data = bytes(data)
    num = int.from_bytes(data, 'big')
    chars = []
    while num:
        num, remainder = divmod(num, 58)
        chars.append(BASE58_CHARACTERS[remainder])
    zeros = len(data) - len(data.lstrip(b'\0'))
    return '1' * zeros + ''.join(reversed(chars))


def base58_decode(codestring):
    """
    Decode a Base58 string to a bytearray, so callers can wipe decoded secrets

    >>> base58_decode('112').hex()
    '000001'

    :param codestring: Base58 encoded string
    :type codestring: str

    :return bytearray:
    """
    if not isinstance(codestring, str):
        raise EncodingError("Base58 string expected")
    num = 0
    for pos in _codestring_to_array(codestring, BASE58_CHARACTERS):
        num = num * 58 + pos
    zeros = len(codestring) - len(codestring.lstrip('1'))
    out = bytearray(zeros + (num.bit_length() + 7) // 8)
    i = len(out)
    while num:
        i -= 1
        num, out[i] = divmod(num, 256)
    return out


def base58check_encode(data):
    """
    Base58 encode data with a 4 byte double SHA256 checksum appended

    :param data: Payload including version prefix
    :type data: bytes

    :return str:
    """
    data = bytes(data)
    return base58_encode(data + double_sha256(data)[:4])


def base58check_decode(codestring):
    """
    Decode a Base58Check string and verify its checksum

    :param codestring: Base58Check encoded string such as an address, WIF or extended key
    :type codestring: str

    :return bytearray: Payload without checksum
    """
    raw = base58_decode(codestring)
    if len(raw) < 5:
        raise EncodingError("Base58Check string too short")
    checksum = bytes(raw[-4:])
    del raw[-4:]
    if double_sha256(raw)[:4] != checksum:
        raw[:] = bytes(len(raw))
        raise EncodingError("Invalid checksum for base58check string")
    return raw


def pubkeyhash_to_addr_base58(pubkeyhash, prefix=b'\x00'):
    """
    Base58Check address of a public key hash or script hash

    >>> pubkeyhash_to_addr_base58('21342f229392d7c9ed82c932916cee6517fbc9a2')
    '142Zp9WZn9Fh4MV8F3H5Dv4Rbg7Ja1sPWZ'

    :param pubkeyhash: 20 byte hash, as bytes or hexadecimal string
    :type pubkeyhash: bytes, str
    :param prefix: Version byte of the network, default is the bitcoin p2pkh prefix 0x00
    :type prefix: bytes, str

    :return str:
    """
    return base58check_encode(_as_bytes(prefix) + _as_bytes(pubkeyhash))


def _bech32_polymod(values):
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1ffffff) << 5) ^ value
        for i, gen in enumerate(BECH32_GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def _bech32_hrp_expand(hrp):
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _bech32_checksum(hrp, data):
    polymod = _bech32_polymod(_bech32_hrp_expand(hrp) + data + [0] * 6) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def pubkeyhash_to_addr_bech32(pubkeyhash, prefix='bc', witver=0, separator='1'):
    """
    Segwit address (BIP173) of a witness program: the human readable prefix, a separator, the witness version and
    program in 5 bit groups and a 6 character checksum.

    >>> pubkeyhash_to_addr_bech32('21c1bc695a56f47991e95ff26856e50f78d3c118')
    'bc1qy8qmc6262m68ny0ftlexs4h9paud8sgce3sf84'

    :param pubkeyhash: 20 byte public key hash or 32 byte script hash
    :type pubkeyhash: bytes, str
    :param prefix: Human readable part: 'bc', 'tb' for testnet or 'bcrt' for regtest
    :type prefix: str
    :param witver: Witness version between 0 and 16
    :type witver: int
    :param separator: Separator between prefix and data
    :type separator: str

    :return str:
    """
    program = _as_bytes(pubkeyhash)
    if len(program) not in [20, 32]:
        raise EncodingError("Witness program must be 20 or 32 bytes, not %d" % len(program))
    if not 0 <= witver <= 16:
        raise EncodingError("Witness version must be between 0 and 16")
    data = [witver] + convertbits(program, 8, 5)
    return prefix + separator + ''.join(BECH32_CHARACTERS[d] for d in data + _bech32_checksum(prefix, data))


def addr_bech32_to_pubkeyhash(bech, prefix=None):
    """
    Witness program of a segwit address

    >>> addr_bech32_to_pubkeyhash('bc1qy8qmc6262m68ny0ftlexs4h9paud8sgce3sf84').hex()
    '21c1bc695a56f47991e95ff26856e50f78d3c118'

    :param bech: Bech32 address, all lower or all upper case
    :type bech: str
    :param prefix: Expected human readable part, not checked if omitted
    :type prefix: str

    :return bytes:
    """
    if any(not 33 <= ord(c) <= 126 for c in bech) or bech not in (bech.lower(), bech.upper()):
        raise EncodingError("Invalid bech32 character in bech string")
    bech = bech.lower()
    pos = bech.rfind('1')
    if pos < 1 or pos + 7 > len(bech) or len(bech) > 90:
        raise EncodingError("Invalid bech32 string length")
    hrp = bech[:pos]
    if prefix and prefix != hrp:
        raise EncodingError("Invalid bech32 address. Prefix '%s', prefix expected is '%s'" % (hrp, prefix))
    data = _codestring_to_array(bech[pos + 1:], BECH32_CHARACTERS)
    if _bech32_polymod(_bech32_hrp_expand(hrp) + data) != 1:
        raise EncodingError("Bech32 checksum error")
    program = convertbits(data[1:-6], 5, 8, False)
    if program is None or not 2 <= len(program) <= 40:
        raise EncodingError("Invalid decoded data length, must be between 2 and 40")
    return bytes(program)


def convertbits(data, frombits, tobits, pad=True):
    """
    Regroup a sequence of frombits-sized integers in tobits-sized integers, i.e. bytes to 5 bit bech32 values.
    Returns None when a value does not fit in frombits or when pad is False and bits are left over.

    :param data: Values to regroup
    :type data: list, bytes
    :param frombits: Bit size of the input values
    :type frombits: int
    :param tobits: Bit size of the output values
    :type tobits: int
    :param pad: Pad the last output value with zero bits
    :type pad: bool

    :return list, None:
    """
    acc = 0
    bits = 0
    result = []
    maxv = (1 << tobits) - 1
    for value in data:
        if value < 0 or value >> frombits:
            return None
        acc = (acc << frombits) | value
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            result.append((acc >> bits) & maxv)
        acc &= (1 << bits) - 1
    if pad:
        if bits:
            result.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or (acc << (tobits - bits)) & maxv:
        return None
    return result


def varbyteint_to_int(byteint):
    """
    Decode a CompactSize integer from the start of byteint: one byte below 0xfd, otherwise a 0xfd, 0xfe or 0xff
    marker followed by a 2, 4 or 8 byte little endian integer.

    >>> varbyteint_to_int(bytes.fromhex('fd1027'))
    (10000, 3)

    :param byteint: Encoded integer, extra bytes are ignored
    :type byteint: bytes

    :return tuple: Integer value and number of bytes used
    """
    if not isinstance(byteint, bytes):
        raise EncodingError("Byteint must be defined as bytes")
    if not byteint:
        raise EncodingError("Unexpected end of data while reading variable length integer")
    marker = byteint[0]
    if marker < 0xfd:
        return marker, 1
    size = {0xfd: 2, 0xfe: 4, 0xff: 8}[marker]
    if len(byteint) < size + 1:
        raise EncodingError("Unexpected end of data while reading variable length integer")
    return int.from_bytes(byteint[1:size + 1], 'little'), size + 1


def read_varbyteint(s):
    """
    Read a CompactSize integer from a BytesIO stream, the stream is positioned directly after it

    :return int:
    """
    pos = s.tell()
    value, size = varbyteint_to_int(s.read(9))
    s.seek(pos + size)
    return value


def int_to_varbyteint(inp):
    """
    Encode a non-negative integer as CompactSize integer

    >>> int_to_varbyteint(10000).hex()
    'fd1027'

    :param inp: Integer to encode, at most 2^64-1
    :type inp: int

    :return bytes:
    """
    if not isinstance(inp, numbers.Integral) or not 0 <= inp <= 0xffffffffffffffff:
        raise EncodingError("Input must be a positive integer smaller than 2^64")
    if inp < 0xfd:
        return bytes([inp])
    for marker, size in [(b'\xfd', 2), (b'\xfe', 4), (b'\xff', 8)]:
        if inp < 1 << (8 * size):
            return marker + inp.to_bytes(size, 'little')


def varstr(string):
    """
    Bytes prefixed with their length as CompactSize integer, as used for scripts in transactions

    >>> varstr(b'abc').hex()
    '03616263'

    :return bytes:
    """
    s = bytes(string)
    return int_to_varbyteint(len(s)) + s


def sha256(string):
    return hashlib.sha256(string).digest()


def double_sha256(string, as_hex=False):
    """
    SHA256 of the SHA256 hash of string, used for transaction hashes, signature hashes and Base58Check checksums

    :param string: Data to hash
    :type string: bytes
    :param as_hex: Return a hexadecimal string instead of bytes
    :type as_hex: bool

    :return bytes, str:
    """
    digest = sha256(sha256(string))
    return digest.hex() if as_hex else digest


def hash160(string):
    """
    RIPEMD-160 of the SHA256 hash of string, used for public key hashes and script hashes in addresses

    :param string: Public key or script
    :type string: bytes

    :return bytes: 20 byte hash
    """
    return RIPEMD160.new(sha256(string)).digest()
