# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    Public key cryptography and Hierarchical Deterministic Key Management
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

import hmac
import hashlib
from bitcointool.networks import Network
from bitcointool.encoding import *
from bitcointool.ecc import EccError, secp256k1_n, secp256k1_p, low_s
from bitcointool.secure import SecureBuffer

_logger = logging.getLogger(__name__)


class BKeyError(Exception):
    """
    Handle Key class Exceptions

    """

    def __init__(self, msg=''):
        self.msg = msg
        _logger.error(msg)

    def __str__(self):
        return self.msg


def mod_sqrt(a):
    """
    Compute the square root of 'a' using the secp256k1 'bitcoin' curve

    Used to calculate y-coordinate if only x-coordinate from public key point is known.
    Formula: y ** 2 == x ** 3 + 7

    :param a: Number to calculate square root
    :type a: int

    :return int:
    """

    # Square root formula: k = (secp256k1_p - 3) // 4
    k = 28948022309329048855892746252171976963317496166410141009864396001977208667915
    return pow(a, k + 1, secp256k1_p)


def _public_point_from_bytes(public_byte):
    if len(public_byte) == 33 and public_byte[:1] in [b'\x02', b'\x03']:
        x = int.from_bytes(public_byte[1:], 'big')
        if x >= secp256k1_p:
            raise BKeyError("Invalid public key, x coordinate out of range")
        ys = (pow(x, 3, secp256k1_p) + 7) % secp256k1_p
        y = mod_sqrt(ys)
        if (y * y) % secp256k1_p != ys:
            raise BKeyError("Invalid public key, point not on curve")
        if y & 1 != public_byte[0] & 1:
            y = secp256k1_p - y
        return x, y, True
    elif len(public_byte) == 65 and public_byte[:1] == b'\x04':
        return int.from_bytes(public_byte[1:33], 'big'), int.from_bytes(public_byte[33:], 'big'), False
    raise BKeyError("Invalid public key, expected 33 byte compressed or 65 byte uncompressed key")


class Key(object):
    """
    Class to generate, import and convert public cryptographic key pairs used for bitcoin.

    Private key material is kept in a SecureBuffer, call :func:`clear` or use the key as a context manager to
    overwrite it with zeros when it is not needed anymore.
    """

    @classmethod
    def from_wif(cls, wif, ecc, network=DEFAULT_NETWORK):
        """
        Import private key in Wallet Import Format. The WIF prefix must match the given network.

        :param wif: WIF encoded private key
        :type wif: str
        :param ecc: Started elliptic curve context
        :type ecc: EccContext
        :param network: Network name or object
        :type network: str, Network

        :return Key:
        """
        network = Network(network)
        try:
            payload = base58check_decode(wif)
        except EncodingError as e:
            raise BKeyError("Invalid WIF key: %s" % e)
        with SecureBuffer(payload) as buf:
            raw = buf.raw
            if raw[:1] != network.prefix_wif:
                raise BKeyError("WIF prefix does not match network %s" % network.name)
            if len(raw) == 34 and raw[33] == 1:
                compressed = True
            elif len(raw) == 33:
                compressed = False
            else:
                raise BKeyError("Invalid WIF key length")
            return cls(memoryview(raw)[1:33], ecc=ecc, network=network, compressed=compressed)

    @classmethod
    def from_public_hex(cls, public_hex, ecc, network=DEFAULT_NETWORK):
        """
        Import public key from hexadecimal compressed or uncompressed format

        :return Key:
        """
        try:
            public_byte = hex_to_bytes(public_hex)
        except EncodingError as e:
            raise BKeyError("Invalid public key: %s" % e)
        x, y, compressed = _public_point_from_bytes(public_byte)
        return cls(public_point=(x, y), ecc=ecc, network=network, compressed=compressed)

    @classmethod
    def generate(cls, ecc, network=DEFAULT_NETWORK):
        """
        Create new random private key

        :return Key:
        """
        secret = ecc.random_secret()
        return cls(secret.to_bytes(32, 'big'), ecc=ecc, network=network)

    def __init__(self, private_byte=None, public_point=None, ecc=None, network=DEFAULT_NETWORK, compressed=True):
        """
        Initialize a Key object from a 32 byte private key or a public point. Use the :func:`from_wif`,
        :func:`from_public_hex` and :func:`generate` methods to import keys from other formats.

        >>> from bitcointool.ecc import EccContext
        >>> with EccContext() as ecc:
        ...     k = Key((1).to_bytes(32, 'big'), ecc=ecc)
        ...     k.address()
        '1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH'

        :param private_byte: Private key as 32 bytes
        :type private_byte: bytes, bytearray, memoryview
        :param public_point: Public key point as (x, y) tuple
        :type public_point: tuple
        :param ecc: Started elliptic curve context
        :type ecc: EccContext
        :param network: Network name or object
        :type network: str, Network
        :param compressed: Use compressed public key for addresses, default is True
        :type compressed: bool
        """
        if ecc is None:
            raise BKeyError("Please provide an elliptic curve context")
        self.ecc = ecc
        self.network = Network(network)
        self.compressed = compressed
        self._private = None
        if private_byte is not None:
            if len(private_byte) != 32:
                raise BKeyError("Private key must be 32 bytes")
            self._private = SecureBuffer(bytearray(private_byte))
            secret = self._private.as_int()
            if not 0 < secret < secp256k1_n:
                self._private.clear()
                raise BKeyError("Invalid private key, must be between 1 and the curve order")
            try:
                self._x, self._y = ecc.point_from_secret(secret)
            except EccError as e:
                self._private.clear()
                raise BKeyError("Could not create public key: %s" % e)
        elif public_point is not None:
            self._x, self._y = public_point
            if not ecc.is_on_curve((self._x, self._y)):
                raise BKeyError("Invalid public key, point not on curve")
        else:
            raise BKeyError("Please specify a private key or public point")

    def __repr__(self):
        return "<Key(public_hex=%s, network=%s)>" % (self.public_hex, self.network.name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear()

    @property
    def is_private(self):
        return self._private is not None and not self._private.cleared

    @property
    def secret(self):
        if not self.is_private:
            raise BKeyError("Key has no private part")
        return self._private.as_int()

    @property
    def private_byte(self):
        if not self.is_private:
            raise BKeyError("Key has no private part")
        return bytes(self._private)

    @property
    def private_hex(self):
        return self.private_byte.hex()

    @property
    def x(self):
        return self._x

    @property
    def y(self):
        return self._y

    def public_point(self):
        return self._x, self._y

    @property
    def public_compressed_byte(self):
        prefix = b'\x03' if self._y % 2 else b'\x02'
        return prefix + self._x.to_bytes(32, 'big')

    @property
    def public_uncompressed_byte(self):
        return b'\x04' + self._x.to_bytes(32, 'big') + self._y.to_bytes(32, 'big')

    @property
    def public_byte(self):
        return self.public_compressed_byte if self.compressed else self.public_uncompressed_byte

    @property
    def public_hex(self):
        return self.public_byte.hex()

    @property
    def hash160(self):
        """
        Get public key in RIPEMD-160 + SHA256 format

        :return bytes:
        """
        return hash160(self.public_byte)

    def clear(self):
        """
        Overwrite private key material with zeros. The key can only be used as public key afterwards.
        """
        if self._private is not None:
            self._private.clear()

    def wif(self):
        """
        Get private key in Wallet Import Format, for compressed keys a 0x01 byte is appended before encoding

        :return str: Base58Check encoded private key
        """
        if not self.is_private:
            raise BKeyError("WIF format not supported for public key")
        with SecureBuffer(self.network.prefix_wif + self.private_byte) as buf:
            if self.compressed:
                buf.raw.append(1)
            return base58check_encode(bytes(buf))

    def address_p2pkh(self):
        return pubkeyhash_to_addr_base58(self.hash160, self.network.prefix_address)

    def p2wpkh_redeemscript(self):
        """
        Witness program script nested in a P2SH output for P2SH-P2WPKH: OP_0 <20 byte key hash>

        :return bytes:
        """
        return b'\x00\x14' + self.hash160

    def address_p2sh_p2wpkh(self):
        return pubkeyhash_to_addr_base58(hash160(self.p2wpkh_redeemscript()), self.network.prefix_address_p2sh)

    def address_p2wpkh(self):
        return pubkeyhash_to_addr_bech32(self.hash160, self.network.prefix_bech32)

    def address(self, script_type='p2pkh'):
        """
        Get address derived from public key

        :param script_type: Type of locking script: p2pkh, p2sh-p2wpkh or p2wpkh
        :type script_type: str

        :return str: Base58 or bech32 encoded address
        """
        if script_type == 'p2pkh':
            return self.address_p2pkh()
        elif script_type in ['p2sh-p2wpkh', 'p2sh_p2wpkh']:
            return self.address_p2sh_p2wpkh()
        elif script_type == 'p2wpkh':
            return self.address_p2wpkh()
        raise BKeyError("Unknown script type %s" % script_type)


class HDKey(Key):
    """
    Class for Hierarchical Deterministic keys as defined in BIP0032

    Besides a private or public key a HD Key has a chain code, allowing to create
    a structure of related keys.

    The structure and key-path are defined in BIP0043 and BIP0044.
    """

    @classmethod
    def from_seed(cls, seed, ecc, network=DEFAULT_NETWORK):
        """
        Used by class init function, import key from seed

        :param seed: Private key seed, 16 to 64 bytes
        :type seed: bytes
        :param ecc: Started elliptic curve context
        :type ecc: EccContext
        :param network: Network name or object
        :type network: str, Network

        :return HDKey:
        """
        seed = bytes(seed)
        if not 16 <= len(seed) <= 64:
            raise BKeyError("Seed must be between 16 and 64 bytes")
        key, chain = cls._key_derivation(seed, b"Bitcoin seed")
        return cls(key, chain, ecc=ecc, network=network)

    @classmethod
    def generate(cls, ecc, network=DEFAULT_NETWORK):
        """
        Create new master key from random seed

        :return HDKey:
        """
        with SecureBuffer(os.urandom(HD_SEED_SIZE)) as seed:
            return cls.from_seed(bytes(seed), ecc=ecc, network=network)

    @classmethod
    def parse(cls, extended_key, ecc, network=DEFAULT_NETWORK):
        """
        Import a serialized extended key (xprv, xpub, tprv, tpub). The version bytes must match the given network

        >>> from bitcointool.ecc import EccContext
        >>> with EccContext() as ecc:
        ...     k = HDKey.parse('xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8', ecc)
        ...     k.address()
        '15mKKb2eos1hWa6tisdPwwDC1a5J1y9nma'

        :param extended_key: Base58 encoded extended key
        :type extended_key: str
        :param ecc: Started elliptic curve context
        :type ecc: EccContext
        :param network: Network name or object
        :type network: str, Network

        :return HDKey:
        """
        network = Network(network)
        try:
            payload = base58check_decode(extended_key)
        except EncodingError as e:
            raise BKeyError("Invalid extended key: %s" % e)
        with SecureBuffer(payload) as buf:
            raw = buf.raw
            if len(raw) != 78:
                raise BKeyError("Invalid extended key length %d, expected 78 bytes" % len(raw))
            version = bytes(raw[:4])
            if version == network.prefix_hdkey_private:
                is_private = True
                if raw[45] != 0:
                    raise BKeyError("Invalid extended private key, key data must start with 0x00")
                key = memoryview(raw)[46:78]
            elif version == network.prefix_hdkey_public:
                is_private = False
                key = raw[45:78]
            else:
                raise BKeyError("Extended key version %s does not match network %s" % (version.hex(), network.name))
            depth = raw[4]
            parent_fingerprint = bytes(raw[5:9])
            child_index = int.from_bytes(raw[9:13], 'big')
            chain = bytes(raw[13:45])
            if depth == 0 and (parent_fingerprint != b'\0\0\0\0' or child_index):
                raise BKeyError("Invalid master key, zero depth with non-zero parent fingerprint or index")
            return cls(key, chain, depth=depth, parent_fingerprint=parent_fingerprint, child_index=child_index,
                       is_private=is_private, ecc=ecc, network=network)

    def __init__(self, key, chain, depth=0, parent_fingerprint=b'\0\0\0\0', child_index=0, is_private=True,
                 ecc=None, network=DEFAULT_NETWORK):
        """
        Hierarchical Deterministic Key class init function.

        :param key: 32 byte private key or 33 byte compressed public key
        :type key: bytes, bytearray
        :param chain: 32 byte chain code
        :type chain: bytes
        :param depth: Level of depth in BIP32 key path
        :type depth: int
        :param parent_fingerprint: 4-byte fingerprint of parent
        :type parent_fingerprint: bytes
        :param child_index: Index number of child as integer, hardened keys have the 0x80000000 bit set
        :type child_index: int
        :param is_private: True if key is private, False for public keys
        :type is_private: bool
        :param ecc: Started elliptic curve context
        :type ecc: EccContext
        :param network: Network name or object
        :type network: str, Network
        """
        if len(chain) != 32:
            raise BKeyError("Chain code must be 32 bytes")
        if not 0 <= depth <= 255:
            raise BKeyError("Depth must be between 0 and 255")
        if is_private:
            super(HDKey, self).__init__(private_byte=key, ecc=ecc, network=network)
        else:
            x, y, compressed = _public_point_from_bytes(bytes(key))
            if not compressed:
                raise BKeyError("Extended public keys must use a compressed public key")
            super(HDKey, self).__init__(public_point=(x, y), ecc=ecc, network=network)
        self.chain = bytes(chain)
        self.depth = depth
        self.parent_fingerprint = parent_fingerprint
        self.child_index = child_index

    def __repr__(self):
        return "<HDKey(public_hex=%s, wif_public=%s, network=%s)>" % \
               (self.public_hex, self.wif_public(), self.network.name)

    @staticmethod
    def _key_derivation(data, chain):
        """
        Derive key and chain part with HMAC-SHA512 of data keyed with chain

        :return tuple: key and chain bytes
        """
        i = hmac.new(chain, data, hashlib.sha512).digest()
        key = i[:32]
        chain = i[32:]
        key_int = int.from_bytes(key, 'big')
        if key_int >= secp256k1_n or key_int == 0:
            raise BKeyError("Key cannot be zero or greater than secp256k1_n. Try another index number.")
        return key, chain

    @property
    def fingerprint(self):
        """
        Get key fingerprint: the first four bytes of the hash160 of this key.

        :return bytes:
        """
        return self.hash160[:4]

    @property
    def is_hardened(self):
        return bool(self.child_index & 0x80000000)

    def wif(self, is_private=None, network=None):
        """
        Get Extended WIF of current key

        >>> from bitcointool.ecc import EccContext
        >>> with EccContext() as ecc:
        ...     k = HDKey.from_seed(bytes.fromhex('000102030405060708090a0b0c0d0e0f'), ecc)
        ...     k.wif(is_private=False)
        'xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8'

        :param is_private: Return public or private key, default is private for private keys
        :type is_private: bool
        :param network: Use version bytes of another network, i.e. 'testnet' to convert a mainnet key
        :type network: str, Network

        :return str: Base58 encoded WIF key
        """
        network = self.network if network is None else Network(network)
        if is_private is None:
            is_private = self.is_private
        if is_private and not self.is_private:
            raise BKeyError("Cannot create private extended key from public key")
        if is_private:
            prefix = network.prefix_hdkey_private
            rkey = b'\0' + self.private_byte
        else:
            prefix = network.prefix_hdkey_public
            rkey = self.public_compressed_byte
        with SecureBuffer(prefix + self.depth.to_bytes(1, 'big') + self.parent_fingerprint +
                          self.child_index.to_bytes(4, 'big') + self.chain + rkey) as raw:
            return base58check_encode(bytes(raw))

    def wif_key(self):
        """
        Get private key of this node in Wallet Import Format, not the extended key

        :return str:
        """
        return super(HDKey, self).wif()

    def wif_public(self, network=None):
        return self.wif(is_private=False, network=network)

    def wif_private(self, network=None):
        return self.wif(is_private=True, network=network)

    def public(self):
        """
        Public version of current key, without private key information

        :return HDKey:
        """
        return HDKey(self.public_compressed_byte, self.chain, depth=self.depth,
                     parent_fingerprint=self.parent_fingerprint, child_index=self.child_index, is_private=False,
                     ecc=self.ecc, network=self.network)

    def child_private(self, index=0, hardened=False):
        """
        Use Child Key Derivation (CDK) to derive child private key of current HD Key object.

        :param index: Key index number
        :type index: int
        :param hardened: Specify if key must be hardened (True) or normal (False)
        :type hardened: bool

        :return HDKey: HD Key class object
        """
        if not self.is_private:
            raise BKeyError("Need a private key to create child private key")
        if index < 0 or index > 0xffffffff:
            raise BKeyError("Child index must be between 0 and 2^32-1")
        if hardened:
            index |= 0x80000000
        if index & 0x80000000:
            data = b'\0' + self.private_byte + index.to_bytes(4, 'big')
        else:
            data = self.public_compressed_byte + index.to_bytes(4, 'big')
        with SecureBuffer(data) as buf:
            key, chain = self._key_derivation(bytes(buf), self.chain)
        newkey = (int.from_bytes(key, 'big') + self.secret) % secp256k1_n
        if newkey == 0:
            raise BKeyError("Key cannot be zero. Try another index number.")
        with SecureBuffer(newkey.to_bytes(32, 'big')) as newkey_buf:
            return HDKey(newkey_buf.raw, chain, depth=self.depth + 1, parent_fingerprint=self.fingerprint,
                         child_index=index, ecc=self.ecc, network=self.network)

    def child_public(self, index=0):
        """
        Use Child Key Derivation to derive child public key of current HD Key object. Hardened indexes cannot be
        derived from a public key.

        :param index: Key index number
        :type index: int

        :return HDKey: HD Key class object
        """
        if index < 0 or index >= 0x80000000:
            raise BKeyError("Cannot derive hardened key from public key. Index must be less than 0x80000000")
        data = self.public_compressed_byte + index.to_bytes(4, 'big')
        key, chain = self._key_derivation(data, self.chain)
        try:
            ki = self.ecc.point_add(self.ecc.point_from_secret(int.from_bytes(key, 'big')), self.public_point())
        except EccError as e:
            raise BKeyError("Could not derive child public key: %s" % e)
        prefix = b'\x03' if ki[1] % 2 else b'\x02'
        return HDKey(prefix + ki[0].to_bytes(32, 'big'), chain, depth=self.depth + 1,
                     parent_fingerprint=self.fingerprint, child_index=index, is_private=False, ecc=self.ecc,
                     network=self.network)

    def subkey_for_path(self, path):
        """
        Determine subkey for HD Key for given path.
        Path format: m / purpose' / coin_type' / account' / change / address_index

        Hardened indexes are marked with a ', h, H, p or P suffix. A path starting with 'M' derives a public key.

        >>> from bitcointool.ecc import EccContext
        >>> with EccContext() as ecc:
        ...     k = HDKey.from_seed(bytes.fromhex('000102030405060708090a0b0c0d0e0f'), ecc)
        ...     k.subkey_for_path("m/0'/1").wif_public()
        'xpub6ASuArnXKPbfEwhqN6e3mwBcDTgzisQN1wXN9BJcM47sSikHjJf3UFHKkNAWbWMiGj7Wf5uMash7SyYq527Hqck2AxYysAA7xmALppuCkwQ'

        :param path: BIP0044 key path
        :type path: str, list

        :return HDKey: HD Key class object of subkey
        """
        if isinstance(path, TYPE_TEXT):
            path = path.split("/")
        if not path:
            raise BKeyError("Could not parse path. Path is empty.")
        key = self
        as_public = False
        if path[0] == 'm':  # Use Private master key
            path = path[1:]
        elif path[0] == 'M':  # Use Public master key
            path = path[1:]
            as_public = True
        for item in path:
            if not item:
                raise BKeyError("Could not parse path. Index is empty.")
            hardened = item[-1] in KEYPATH_HARDENED_MARKERS
            if hardened:
                item = item[:-1]
            if not item or any(c not in '0123456789' for c in item):
                raise BKeyError("Could not parse path. Index '%s' is not a positive integer." % item)
            index = int(item)
            if index >= 0x80000000:
                raise BKeyError("Could not parse path. Index must be smaller than 2^31.")
            if key.is_private:
                key = key.child_private(index=index, hardened=hardened)
            elif hardened:
                raise BKeyError("Cannot derive hardened key from public key")
            else:
                key = key.child_public(index=index)
        if as_public and key.is_private:
            key = key.public()
        return key


class Signature(object):
    """
    Signature class for transactions. Holds r and s values of an ECDSA signature and the sighash type.

    >>> sig = Signature.parse_compact(bytes.fromhex('48e994862e2cdb372149bad9d9894cf3a5562b4565035943efe0acc502769d351cb88752b5fe8d70d85f3541046df617f8459e991d06a7c0db13b5d4531cd6d4'))
    >>> sig.hex()[:16]
    '48e994862e2cdb37'
    """

    @classmethod
    def parse_compact(cls, signature, hash_type=SIGHASH_ALL):
        """
        Create signature from 64 byte compact r || s format

        :return Signature:
        """
        if len(signature) != 64:
            raise BKeyError("Compact signature must be 64 bytes")
        return cls(int.from_bytes(signature[:32], 'big'), int.from_bytes(signature[32:], 'big'), hash_type)

    @classmethod
    def create(cls, digest, key, hash_type=SIGHASH_ALL):
        """
        Sign a 32 byte digest with the private key. The resulting signature is deterministic (RFC6979) and has a
        low s value.

        :param digest: Transaction signature hash
        :type digest: bytes
        :param key: Private key
        :type key: Key
        :param hash_type: Sighash type to append to DER encoded signature
        :type hash_type: int

        :return Signature:
        """
        if not key.is_private:
            raise BKeyError("Private key needed to create signature")
        try:
            r, s = key.ecc.sign_digest(key.secret, digest)
        except EccError as e:
            raise BKeyError("Signing failed: %s" % e)
        return cls(r, s, hash_type)

    def __init__(self, r, s, hash_type=SIGHASH_ALL):
        self.r = int(r)
        self.s = int(s)
        self.hash_type = hash_type
        if self.r < 1 or self.r >= secp256k1_n:
            raise BKeyError('Invalid Signature: r is not a positive integer smaller than the curve order')
        elif self.s < 1 or self.s >= secp256k1_n:
            raise BKeyError('Invalid Signature: s is not a positive integer smaller than the curve order')

    def __repr__(self):
        return "<Signature(r=%d, s=%d, hash_type=%d)>" % (self.r, self.s, self.hash_type)

    def normalized(self):
        """
        Copy of signature with low s value (BIP62)

        :return Signature:
        """
        return Signature(self.r, low_s(self.s), self.hash_type)

    def compact(self):
        return self.r.to_bytes(32, 'big') + self.s.to_bytes(32, 'big')

    def hex(self):
        return self.compact().hex()

    def as_der_encoded(self, ecc, include_hash_type=True):
        """
        Get DER encoded signature

        :param ecc: Started elliptic curve context
        :type ecc: EccContext
        :param include_hash_type: Include hash_type byte at end of signature as used in raw scripts. Default is True
        :type include_hash_type: bool

        :return bytes:
        """
        der = ecc.der_encode(self.r, self.s)
        if include_hash_type:
            der += (self.hash_type & 0xff).to_bytes(1, 'big')
        if len(der) > MAX_DER_SIGNATURE_SIZE:
            raise BKeyError("DER encoded signature too large")
        return der

    def verify(self, digest, key):
        """
        Verify signature of digest with public key of given key

        :return bool:
        """
        return key.ecc.verify_digest(key.public_point(), digest, self.r, self.s)
