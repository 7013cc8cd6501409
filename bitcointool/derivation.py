# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    DERIVATION - Derive hierarchical deterministic keys for a sequence of key paths
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

from bitcointool.main import *
from bitcointool.keys import BKeyError, HDKey

_logger = logging.getLogger(__name__)


class DerivationError(ToolError):
    """
    Raised when a key path cannot be derived from the master key
    """
    def __init__(self, path, msg=''):
        self.path = path
        super(DerivationError, self).__init__(ErrorKind.DERIVATION_FAILED, msg or "Deriving child key failed")


class DerivationResult(object):
    """
    Result of deriving one key path: the derived key, or the error when derivation failed and the failure policy
    is 'continue'.
    """

    def __init__(self, path, key=None, error=None):
        self.path = path
        self.key = key
        self.error = error

    def __repr__(self):
        return "<DerivationResult(path=%s, %s)>" % (self.path, 'ok' if self.ok else 'failed')

    @property
    def ok(self):
        return self.key is not None


def derive_all(master_key, paths, policy=None):
    """
    Derive a child key for each key path in order. Each result is yielded before the next path is derived.

    >>> from bitcointool.ecc import EccContext
    >>> with EccContext() as ecc:
    ...     mk = HDKey.from_seed(bytes.fromhex('000102030405060708090a0b0c0d0e0f'), ecc)
    ...     [r.key.child_index for r in derive_all(mk, ['m/0', 'm/1'])]
    [0, 1]

    :param master_key: Extended key to derive from, private or public
    :type master_key: HDKey
    :param paths: Key paths, i.e. the result of :func:`bitcointool.keypath.expand`
    :type paths: iterable of str
    :param policy: 'abort' to raise a DerivationError on the first failing path, 'continue' to yield a failed
        DerivationResult and proceed with the next path. Default is DERIVATION_FAILURE_POLICY from config
    :type policy: str

    :return iterator of DerivationResult:
    """
    if policy is None:
        policy = DERIVATION_FAILURE_POLICY
    if policy not in DERIVATION_FAILURE_POLICIES:
        raise ToolError(ErrorKind.OPERATION_FAILED, "Unknown derivation failure policy '%s'" % policy)
    for path in paths:
        try:
            key = master_key.subkey_for_path(path)
        except BKeyError as e:
            if policy == 'abort':
                raise DerivationError(path)
            _logger.warning("Derivation of path %s failed, continue with next path: %s" % (path, e))
            yield DerivationResult(path, error=DerivationError(path))
            continue
        yield DerivationResult(path, key=key)


def derive_extended_key(extended_key, paths, ecc, network=DEFAULT_NETWORK, policy=None):
    """
    Parse an extended key and derive all key paths, see :func:`derive_all`. An extended key which cannot be parsed
    for this network raises a DerivationError.

    :return iterator of DerivationResult:
    """
    try:
        master_key = HDKey.parse(extended_key, ecc, network)
    except BKeyError:
        raise DerivationError(None)
    try:
        yield from derive_all(master_key, paths, policy)
    finally:
        master_key.clear()
