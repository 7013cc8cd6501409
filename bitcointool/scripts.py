# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    SCRIPTS - Parse and classify transaction scripts
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

from io import BytesIO
from bitcointool.encoding import *

_logger = logging.getLogger(__name__)

PUSHDATA_SIZES = {op.op_pushdata1: 1, op.op_pushdata2: 2, op.op_pushdata4: 4}


class ScriptError(Exception):
    """
    Handle Script Exceptions
    """

    def __init__(self, msg=''):
        self.msg = msg
        _logger.error(msg)

    def __str__(self):
        return self.msg


def data_pack(data):
    """
    Add data length prefix to data string to include data in a script

    >>> data_pack(b'\\x01\\x02').hex()
    '020102'

    :param data: Data to be packed
    :type data: bytes

    :return bytes:
    """
    if len(data) <= 75:
        return len(data).to_bytes(1, 'big') + data
    elif 75 < len(data) <= 255:
        return op.op_pushdata1.to_bytes(1, 'big') + len(data).to_bytes(1, 'little') + data
    elif len(data) <= 0xffff:
        return op.op_pushdata2.to_bytes(1, 'big') + len(data).to_bytes(2, 'little') + data
    else:
        return op.op_pushdata4.to_bytes(1, 'big') + len(data).to_bytes(4, 'little') + data


def script_commands(script):
    """
    Split raw script in a list of (opcode, data, position) tuples. Data is None for non-push opcodes, position is
    the offset of the opcode in the script.

    :param script: Raw script
    :type script: bytes

    :return list:
    """
    commands = []
    s = BytesIO(script)
    while True:
        pos = s.tell()
        chb = s.read(1)
        if not chb:
            break
        ch = chb[0]
        data = None
        if ch <= op.op_pushdata4:
            size_len = PUSHDATA_SIZES.get(ch, 0)
            size_bytes = s.read(size_len)
            if len(size_bytes) != size_len:
                raise ScriptError("Malformed script, push length missing at position %d" % pos)
            data_length = int.from_bytes(size_bytes, 'little') if size_len else ch
            data = s.read(data_length)
            if len(data) != data_length:
                raise ScriptError("Malformed script, not enough data found at position %d" % pos)
        commands.append((ch, data, pos))
    return commands


def script_remove_codeseparators(script):
    """
    Copy of script with all OP_CODESEPARATOR opcodes removed, as used in legacy signature hashes.
    Bytes after a malformed push are copied unchanged.

    >>> script_remove_codeseparators(bytes.fromhex('ab76ab')).hex()
    '76'

    :param script: Raw script
    :type script: bytes

    :return bytes:
    """
    result = b''
    s = BytesIO(script)
    while True:
        pos = s.tell()
        chb = s.read(1)
        if not chb:
            break
        ch = chb[0]
        if ch <= op.op_pushdata4:
            size_len = PUSHDATA_SIZES.get(ch, 0)
            size_bytes = s.read(size_len)
            data_length = ch if not size_len else int.from_bytes(size_bytes, 'little')
            data = s.read(data_length)
            if len(size_bytes) != size_len or len(data) != data_length:
                result += script[pos:]
                break
            result += script[pos:s.tell()]
        elif ch != op.op_codeseparator:
            result += chb
    return result


def script_p2pkh(public_hash):
    return bytes([op.op_dup, op.op_hash160]) + data_pack(public_hash) + bytes([op.op_equalverify, op.op_checksig])


def script_p2sh(script_hash):
    return bytes([op.op_hash160]) + data_pack(script_hash) + bytes([op.op_equal])


def script_p2wpkh(public_hash):
    return bytes([op.op_0]) + data_pack(public_hash)


def _decode_op_n(opcode):
    if opcode == op.op_0:
        return 0
    return opcode - op.op_1 + 1


class Script(object):
    """
    Transaction script with its raw bytes, script type and solutions, i.e. the public key hash of a p2pkh script
    or the keys of a multisig script.

    >>> s = Script.parse_hex('76a91421342f229392d7c9ed82c932916cee6517fbc9a288ac')
    >>> s.script_type
    'p2pkh'
    >>> s.solutions[0].hex()
    '21342f229392d7c9ed82c932916cee6517fbc9a2'
    """

    @classmethod
    def parse_hex(cls, script_hex):
        """
        Parse script in hexadecimal string format

        :return Script:
        """
        try:
            raw = hex_to_bytes(script_hex)
        except EncodingError as e:
            raise ScriptError("Invalid script hex: %s" % e)
        return cls(raw)

    def __init__(self, raw=b''):
        self.raw = bytes(raw)
        self.script_type, self.solutions = self.classify(self.raw)

    def __repr__(self):
        return "<Script(type=%s, %s)>" % (self.script_type, self.raw.hex())

    def __str__(self):
        """
        Human readable script: pushed data in hex and opcode names for all other commands

        >>> str(Script(script_p2sh(bytes(20))))
        'OP_HASH160 0000000000000000000000000000000000000000 OP_EQUAL'
        """
        try:
            commands = script_commands(self.raw)
        except ScriptError:
            return self.raw.hex()
        items = []
        for opcode, data, _ in commands:
            if data is not None and opcode != op.op_0:
                items.append(data.hex())
            else:
                items.append(opcodenames.get(opcode, 'OP_UNKNOWN_%d' % opcode))
        return ' '.join(items)

    def __len__(self):
        return len(self.raw)

    def __bool__(self):
        return bool(self.raw)

    def __eq__(self, other):
        if isinstance(other, Script):
            other = other.raw
        return self.raw == other

    def __hash__(self):
        return hash(self.raw)

    def hex(self):
        return self.raw.hex()

    @staticmethod
    def classify(raw):
        """
        Determine the standard script type and extract its solutions

        :param raw: Raw script
        :type raw: bytes

        :return tuple: script type and list of solutions in bytes
        """
        ln = len(raw)
        if ln == 23 and raw[0] == op.op_hash160 and raw[1] == 20 and raw[22] == op.op_equal:
            return 'p2sh', [raw[2:22]]
        if 4 <= ln <= 42 and (raw[0] == op.op_0 or op.op_1 <= raw[0] <= op.op_16) and raw[1] + 2 == ln:
            version = _decode_op_n(raw[0])
            program = raw[2:]
            if version == 0 and len(program) == 20:
                return 'p2wpkh', [program]
            if version == 0 and len(program) == 32:
                return 'p2wsh', [program]
            if version == 1 and len(program) == 32:
                return 'p2tr', [program]
            return 'nonstandard', []

        try:
            commands = script_commands(raw)
        except ScriptError:
            return 'nonstandard', []
        if not commands:
            return 'nonstandard', []

        if commands[0][0] == op.op_return and \
                all(c[1] is not None or op.op_1 <= c[0] <= op.op_16 for c in commands[1:]):
            return 'nulldata', []
        if len(commands) == 2 and commands[0][1] is not None and len(commands[0][1]) in [33, 65] and \
                commands[1][0] == op.op_checksig:
            return 'p2pk', [commands[0][1]]
        if ln == 25 and raw[:3] == bytes([op.op_dup, op.op_hash160, 20]) and \
                raw[23:] == bytes([op.op_equalverify, op.op_checksig]):
            return 'p2pkh', [raw[3:23]]
        if len(commands) >= 4 and commands[-1][0] == op.op_checkmultisig and \
                op.op_1 <= commands[0][0] <= op.op_16 and op.op_1 <= commands[-2][0] <= op.op_16:
            keys = [c[1] for c in commands[1:-2]]
            m = _decode_op_n(commands[0][0])
            n = _decode_op_n(commands[-2][0])
            if all(k is not None and len(k) in [33, 65] for k in keys) and len(keys) == n and m <= n:
                return 'multisig', [bytes([m])] + keys + [bytes([n])]
        return 'nonstandard', []
