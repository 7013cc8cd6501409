# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    ECC - Scoped access to the secp256k1 elliptic curve library
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

import hashlib
import random
from bitcointool.main import *

_logger = logging.getLogger(__name__)

USE_FASTECDSA = os.getenv("USE_FASTECDSA") not in ["false", "False", "0", "FALSE"]
try:
    if USE_FASTECDSA is not False:
        from fastecdsa import ecdsa as fastecdsa_ecdsa
        from fastecdsa import keys as fastecdsa_keys
        from fastecdsa import point as fastecdsa_point
        from fastecdsa.curve import secp256k1 as fastecdsa_secp256k1
        from fastecdsa.encoding.der import DEREncoder, InvalidDerSignature
        USE_FASTECDSA = True
except ImportError:
    pass
if 'fastecdsa' not in sys.modules:
    _logger.warning("Could not include fastecdsa library, using slower ecdsa instead. ")
    USE_FASTECDSA = False
    import ecdsa


# Parameters secp256k1
#  from http://www.secg.org/sec2-v2.pdf, par 2.4.1
secp256k1_p = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
secp256k1_n = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
secp256k1_b = 7
secp256k1_a = 0
secp256k1_Gx = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
secp256k1_Gy = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

if USE_FASTECDSA:
    DER_DECODE_ERRORS = (ValueError, InvalidDerSignature)
else:
    secp256k1_curve = ecdsa.ellipticcurve.CurveFp(secp256k1_p, secp256k1_a, secp256k1_b)
    secp256k1_generator = ecdsa.ellipticcurve.Point(secp256k1_curve, secp256k1_Gx, secp256k1_Gy, secp256k1_n)
    DER_DECODE_ERRORS = (ValueError, ecdsa.der.UnexpectedDER)


class EccError(Exception):
    """
    Elliptic curve library errors, i.e. invalid points or using a context which is not started
    """
    def __init__(self, msg=''):
        self.msg = msg
        _logger.error(msg)

    def __str__(self):
        return self.msg


def low_s(s):
    """
    Normalize signature s value to the lower half of the curve order

    :param s: Signature s value
    :type s: int

    :return int:
    """
    if s > secp256k1_n // 2:
        return secp256k1_n - s
    return s


class EccContext(object):
    """
    Explicit context for all elliptic curve operations. Create one at the start of a command and release it
    at the end, preferably by using it as a context manager:

    >>> with EccContext() as ecc:
    ...     ecc.point_from_secret(1) == (secp256k1_Gx, secp256k1_Gy)
    True

    Points are passed in and out as (x, y) integer tuples so callers do not depend on the backend library, which
    is fastecdsa or the pure python ecdsa library when fastecdsa is not available.
    """

    def __init__(self):
        self.started = False
        self.backend = 'fastecdsa' if USE_FASTECDSA else 'ecdsa'

    def __repr__(self):
        return "<EccContext(backend=%s, started=%s)>" % (self.backend, self.started)

    def start(self):
        if self.started:
            raise EccError("Elliptic curve context already started")
        self.started = True
        _logger.debug("Started elliptic curve context with %s backend" % self.backend)
        return self

    def stop(self):
        self.started = False
        _logger.debug("Stopped elliptic curve context")

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def _check(self):
        if not self.started:
            raise EccError("Elliptic curve context is not started")

    @staticmethod
    def _to_point(point):
        x, y = point
        if USE_FASTECDSA:
            return fastecdsa_point.Point(x, y, curve=fastecdsa_secp256k1)
        else:
            return ecdsa.ellipticcurve.Point(secp256k1_curve, x, y)

    @staticmethod
    def _from_point(point):
        if USE_FASTECDSA:
            return int(point.x), int(point.y)
        if point == ecdsa.ellipticcurve.INFINITY:
            raise EccError("Point at infinity")
        return int(point.x()), int(point.y())

    def random_secret(self):
        """
        Create a random secret in range 1 .. n-1 with the operating system's random source

        :return int:
        """
        self._check()
        return random.SystemRandom().randint(1, secp256k1_n - 1)

    def is_on_curve(self, point):
        """
        Check if point satisfies y^2 = x^3 + 7 over the secp256k1 field

        :param point: (x, y) coordinates
        :type point: tuple

        :return bool:
        """
        self._check()
        x, y = point
        if not (0 <= x < secp256k1_p and 0 <= y < secp256k1_p):
            return False
        return (y * y - x ** 3 - secp256k1_a * x - secp256k1_b) % secp256k1_p == 0

    def point_from_secret(self, secret):
        """
        Multiply generator point G with secret

        :param secret: Secret in range 1 .. n-1
        :type secret: int

        :return tuple: (x, y) of public point
        """
        self._check()
        secret = int(secret)
        if not 0 < secret < secp256k1_n:
            raise EccError("Secret must be between 1 and the curve order")
        if USE_FASTECDSA:
            return self._from_point(fastecdsa_keys.get_public_key(secret, fastecdsa_secp256k1))
        return self._from_point(secp256k1_generator * secret)

    def point_add(self, point_a, point_b):
        """
        Add two points on the secp256k1 curve

        :return tuple: (x, y) of resulting point
        """
        self._check()
        if point_a[0] == point_b[0] and (point_a[1] + point_b[1]) % secp256k1_p == 0:
            raise EccError("Point addition results in point at infinity")
        return self._from_point(self._to_point(point_a) + self._to_point(point_b))

    def sign_digest(self, secret, digest):
        """
        Create a deterministic (RFC6979) ECDSA signature for a 32 byte digest with a low s value

        :param secret: Private key secret
        :type secret: int
        :param digest: 32 byte message digest, i.e. a transaction signature hash
        :type digest: bytes

        :return tuple: (r, s) integers
        """
        self._check()
        if len(digest) != 32:
            raise EccError("Digest to sign must be 32 bytes")
        if not 0 < secret < secp256k1_n:
            raise EccError("Invalid private key secret")
        if USE_FASTECDSA:
            r, s = fastecdsa_ecdsa.sign(digest, secret, curve=fastecdsa_secp256k1, hashfunc=hashlib.sha256,
                                        prehashed=True)
        else:
            sk = ecdsa.SigningKey.from_secret_exponent(secret, curve=ecdsa.SECP256k1, hashfunc=hashlib.sha256)
            sig = sk.sign_digest_deterministic(digest, hashfunc=hashlib.sha256,
                                               sigencode=ecdsa.util.sigencode_string)
            r = int.from_bytes(sig[:32], 'big')
            s = int.from_bytes(sig[32:], 'big')
        return int(r), low_s(int(s))

    def verify_digest(self, point, digest, r, s):
        """
        Verify ECDSA signature (r, s) of digest with public point

        :return bool:
        """
        self._check()
        if not (0 < r < secp256k1_n and 0 < s < secp256k1_n):
            return False
        if USE_FASTECDSA:
            return fastecdsa_ecdsa.verify((r, s), digest, self._to_point(point), curve=fastecdsa_secp256k1,
                                          hashfunc=hashlib.sha256, prehashed=True)
        vk = ecdsa.VerifyingKey.from_public_point(self._to_point(point), curve=ecdsa.SECP256k1,
                                                  hashfunc=hashlib.sha256)
        try:
            return vk.verify_digest(r.to_bytes(32, 'big') + s.to_bytes(32, 'big'), digest,
                                    sigdecode=ecdsa.util.sigdecode_string)
        except ecdsa.keys.BadSignatureError:
            return False

    def der_encode(self, r, s):
        """
        Create DER encoded signature with signature r and s value.

        :return bytes:
        """
        self._check()
        if USE_FASTECDSA:
            return DEREncoder.encode_signature(r, s)
        rb = ecdsa.der.encode_integer(r)
        sb = ecdsa.der.encode_integer(s)
        return ecdsa.der.encode_sequence(rb, sb)

    def der_decode(self, der):
        """
        Extract r and s from a DER encoded signature, without sighash type byte

        :return tuple: (r, s) integers
        """
        self._check()
        try:
            if USE_FASTECDSA:
                r, s = DEREncoder.decode_signature(bytes(der))
            else:
                sg, junk = ecdsa.der.remove_sequence(bytes(der))
                if junk != b'':
                    raise EccError("Junk found in encoding sequence %s" % junk.hex())
                r, sg = ecdsa.der.remove_integer(sg)
                s, sg = ecdsa.der.remove_integer(sg)
                if sg != b'':
                    raise EccError("Junk found after signature integers")
        except DER_DECODE_ERRORS as e:
            raise EccError("Invalid DER signature: %s" % e)
        return int(r), int(s)
