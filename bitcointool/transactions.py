# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    TRANSACTION class to parse, sign and serialize transactions
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
from bitcointool.keys import BKeyError, Signature
from bitcointool.scripts import Script, data_pack, script_p2pkh, script_remove_codeseparators

_logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """
    Handle Transaction class Exceptions
    """

    def __init__(self, msg=''):
        self.msg = msg
        _logger.error(msg)

    def __str__(self):
        return self.msg


class SignResult(enum.Enum):
    """
    Result codes of :func:`Transaction.sign_input`
    """
    OK = 'OK'
    INVALID_KEY = 'INVALID_KEY'
    NO_KEY_MATCH = 'NO_KEY_MATCH'
    SIGHASH_FAILED = 'SIGHASH_FAILED'
    UNKNOWN_SCRIPT_TYPE = 'UNKNOWN_SCRIPT_TYPE'
    INVALID_TX_OR_SCRIPT = 'INVALID_TX_OR_SCRIPT'
    INPUTINDEX_OUT_OF_RANGE = 'INPUTINDEX_OUT_OF_RANGE'

    def __str__(self):
        return self.value


def _read(rawtx, size, what):
    data = rawtx.read(size)
    if len(data) != size:
        raise TransactionError("Invalid transaction size, %s incomplete" % what)
    return data


def _read_varbyteint(rawtx, what):
    try:
        return read_varbyteint(rawtx)
    except EncodingError:
        raise TransactionError("Invalid transaction size, %s incomplete" % what)


class Input(object):
    """
    Transaction Input class, references an output of a previous transaction

    """

    def __init__(self, prev_hash, output_n, unlocking_script=b'', sequence=SEQUENCE_FINAL, witnesses=None,
                 index_n=0):
        """
        Create a new transaction input

        :param prev_hash: Hash of previous transaction in serialization order (reversed transaction ID)
        :type prev_hash: bytes
        :param output_n: Output number in previous transaction
        :type output_n: int
        :param unlocking_script: Unlocking script (scriptSig)
        :type unlocking_script: bytes
        :param sequence: Sequence part of input
        :type sequence: int
        :param witnesses: List of witness stack items
        :type witnesses: list of bytes
        :param index_n: Index of input in transaction
        :type index_n: int
        """
        if len(prev_hash) != 32:
            raise TransactionError("Previous transaction hash must be 32 bytes")
        self.prev_hash = bytes(prev_hash)
        self.output_n = output_n
        self.unlocking_script = bytes(unlocking_script)
        self.sequence = sequence
        self.witnesses = list(witnesses) if witnesses else []
        self.index_n = index_n

    @classmethod
    def parse(cls, rawtx, index_n=0):
        """
        Parse raw BytesIO string and return Input object

        :param rawtx: Input stream, positioned at start of input
        :type rawtx: BytesIO
        :param index_n: Index of input in transaction
        :type index_n: int

        :return Input:
        """
        prev_hash = _read(rawtx, 32, 'input previous hash')
        output_n = int.from_bytes(_read(rawtx, 4, 'input output number'), 'little')
        script_size = _read_varbyteint(rawtx, 'input script length')
        unlocking_script = _read(rawtx, script_size, 'input unlocking script')
        sequence = int.from_bytes(_read(rawtx, 4, 'input sequence'), 'little')
        return Input(prev_hash, output_n, unlocking_script, sequence, index_n=index_n)

    @property
    def prev_txid(self):
        return reversed_hex(self.prev_hash)

    def outpoint(self):
        return self.prev_hash + self.output_n.to_bytes(4, 'little')

    def __repr__(self):
        return "<Input(prev_txid=%s, output_n=%d, index_n=%d)>" % (self.prev_txid, self.output_n, self.index_n)

    def __eq__(self, other):
        return isinstance(other, Input) and (self.prev_hash, self.output_n, self.unlocking_script, self.sequence,
                                             self.witnesses) == \
            (other.prev_hash, other.output_n, other.unlocking_script, other.sequence, other.witnesses)


class Output(object):
    """
    Transaction Output class, contains value in smallest denominator and a locking script

    """

    def __init__(self, value, lock_script=b'', output_n=0):
        self.value = value
        self.lock_script = bytes(lock_script)
        self.output_n = output_n

    @classmethod
    def parse(cls, rawtx, output_n=0):
        """
        Parse raw BytesIO string and return Output object

        :return Output:
        """
        value = int.from_bytes(_read(rawtx, 8, 'output value'), 'little')
        script_size = _read_varbyteint(rawtx, 'output script length')
        lock_script = _read(rawtx, script_size, 'output locking script')
        return Output(value, lock_script, output_n)

    def raw(self):
        return (self.value & 0xffffffffffffffff).to_bytes(8, 'little') + varstr(self.lock_script)

    @property
    def script_type(self):
        return Script(self.lock_script).script_type

    def __repr__(self):
        return "<Output(value=%d, script_type=%s)>" % (self.value, self.script_type)

    def __eq__(self, other):
        return isinstance(other, Output) and (self.value, self.lock_script) == (other.value, other.lock_script)


class Transaction(object):
    """
    Transaction Class

    Contains 1 or more Input class object with UTXO's to spent and 1 or more Output class objects with destinations.
    Besides the transaction class contains a locktime and version.

    Inputs and outputs can be included when creating the transaction, or parsed from a raw transaction with
    :func:`parse_hex`. Use :func:`signature_hash` to calculate the digest to sign for an input and
    :func:`sign_input` to sign it and add the signature to the input.
    """

    @classmethod
    def parse_bytesio(cls, rawtx):
        """
        Parse a raw transaction and create a Transaction object. All bytes of the stream must be used.

        :param rawtx: Raw transaction bytes stream
        :type rawtx: BytesIO

        :return Transaction:
        """
        version = int.from_bytes(_read(rawtx, 4, 'version'), 'little')
        has_witness = False
        marker = rawtx.read(1)
        if marker == b'\0':
            flag = _read(rawtx, 1, 'witness flag')
            if flag != b'\1':
                raise TransactionError("Unknown transaction flag %s" % flag.hex())
            has_witness = True
        else:
            rawtx.seek(-len(marker), 1)

        n_inputs = _read_varbyteint(rawtx, 'input count')
        inputs = []
        for n in range(0, n_inputs):
            inputs.append(Input.parse(rawtx, index_n=n))

        n_outputs = _read_varbyteint(rawtx, 'output count')
        outputs = []
        for n in range(0, n_outputs):
            outputs.append(Output.parse(rawtx, output_n=n))

        if has_witness:
            for inp in inputs:
                n_items = _read_varbyteint(rawtx, 'witness count')
                for m in range(0, n_items):
                    item_size = _read_varbyteint(rawtx, 'witness item length')
                    inp.witnesses.append(_read(rawtx, item_size, 'witness item'))

        locktime = int.from_bytes(_read(rawtx, 4, 'locktime'), 'little')
        if rawtx.read(1):
            raise TransactionError("Invalid transaction size, extra data found after locktime")
        return Transaction(inputs, outputs, locktime, version)

    @classmethod
    def parse_bytes(cls, rawtx):
        return cls.parse_bytesio(BytesIO(rawtx))

    @classmethod
    def parse_hex(cls, rawtx):
        """
        Parse a raw hexadecimal transaction and create a Transaction object

        :param rawtx: Raw transaction hexadecimal string
        :type rawtx: str

        :return Transaction:
        """
        try:
            raw = hex_to_bytes(rawtx)
        except EncodingError as e:
            raise TransactionError("Invalid transaction hex: %s" % e)
        return cls.parse_bytes(raw)

    def __init__(self, inputs=None, outputs=None, locktime=0, version=1):
        self.inputs = inputs if inputs else []
        self.outputs = outputs if outputs else []
        self.locktime = locktime
        self.version = version

    def __repr__(self):
        return "<Transaction(inputs=%d, outputs=%d, version=%d, locktime=%d)>" % \
               (len(self.inputs), len(self.outputs), self.version, self.locktime)

    def __eq__(self, other):
        return isinstance(other, Transaction) and self.raw() == other.raw()

    @property
    def has_witness(self):
        return any(i.witnesses for i in self.inputs)

    def raw(self, include_witness=True):
        """
        Serialize raw transaction. Witness data is included if available and include_witness is True

        :param include_witness: Include witness marker, flag and data for inputs with witnesses
        :type include_witness: bool

        :return bytes:
        """
        witness = include_witness and self.has_witness
        r = (self.version & 0xffffffff).to_bytes(4, 'little')
        if witness:
            r += b'\x00'  # marker (BIP 141)
            r += b'\x01'  # flag (BIP 141)
        r += int_to_varbyteint(len(self.inputs))
        for i in self.inputs:
            r += i.outpoint() + varstr(i.unlocking_script) + i.sequence.to_bytes(4, 'little')
        r += int_to_varbyteint(len(self.outputs))
        for o in self.outputs:
            r += o.raw()
        if witness:
            for i in self.inputs:
                r += int_to_varbyteint(len(i.witnesses)) + b''.join([varstr(w) for w in i.witnesses])
        r += self.locktime.to_bytes(4, 'little')
        return r

    def raw_hex(self, include_witness=True):
        return self.raw(include_witness).hex()

    def signature_hash(self, sign_id, script, hash_type=SIGHASH_ALL, amount=0,
                       sigversion=SIGNATURE_VERSION_STANDARD):
        """
        Double SHA256 hash of the transaction serialization to sign for an input. Returned in computation order,
        use :func:`reversed_hex` to display it.

        :param sign_id: Index of input to sign
        :type sign_id: int
        :param script: Script code: the locking script of the output spent, or the P2PKH script for P2WPKH inputs
        :type script: bytes
        :param hash_type: Specific hash type, default is SIGHASH_ALL
        :type hash_type: int
        :param amount: Value of the output spent, only used for segwit signatures
        :type amount: int
        :param sigversion: SIGNATURE_VERSION_STANDARD for legacy or SIGNATURE_VERSION_SEGWIT for BIP143 signatures
        :type sigversion: int

        :return bytes: Transaction signature hash
        """
        if not 0 <= sign_id < len(self.inputs):
            raise TransactionError("Input index %d out of range" % sign_id)
        if sigversion == SIGNATURE_VERSION_SEGWIT:
            if not 0 <= amount <= 0xffffffffffffffff:
                raise TransactionError("Amount must be a positive 64 bit integer")
            return double_sha256(self.signature_segwit(sign_id, script, hash_type, amount))
        elif sigversion == SIGNATURE_VERSION_STANDARD:
            if (hash_type & 0x1f) == SIGHASH_SINGLE and sign_id >= len(self.outputs):
                return (1).to_bytes(32, 'little')
            return double_sha256(self.signature(sign_id, script, hash_type))
        raise TransactionError("Unknown signature version %s" % sigversion)

    def signature(self, sign_id, script, hash_type=SIGHASH_ALL):
        """
        Serialize transaction for a legacy signature: all unlocking scripts are emptied and the script with
        OP_CODESEPARATOR opcodes removed is placed in the input to sign. Outputs and other inputs are modified
        according to the sighash type.

        :return bytes: Legacy transaction signature preimage
        """
        base_type = hash_type & 0x1f
        anyonecanpay = hash_type & SIGHASH_ANYONECANPAY
        script_code = script_remove_codeseparators(script)

        r = (self.version & 0xffffffff).to_bytes(4, 'little')
        inputs = [self.inputs[sign_id]] if anyonecanpay else self.inputs
        r += int_to_varbyteint(len(inputs))
        for n, i in enumerate(inputs):
            is_signing = anyonecanpay or n == sign_id
            r += i.outpoint()
            r += varstr(script_code) if is_signing else b'\0'
            if not is_signing and base_type in [SIGHASH_NONE, SIGHASH_SINGLE]:
                r += b'\0\0\0\0'
            else:
                r += i.sequence.to_bytes(4, 'little')

        if base_type == SIGHASH_NONE:
            r += int_to_varbyteint(0)
        elif base_type == SIGHASH_SINGLE:
            r += int_to_varbyteint(sign_id + 1)
            for n in range(sign_id):
                r += b'\xff' * 8 + varstr(b'')
            r += self.outputs[sign_id].raw()
        else:
            r += int_to_varbyteint(len(self.outputs))
            for o in self.outputs:
                r += o.raw()

        r += self.locktime.to_bytes(4, 'little')
        r += (hash_type & 0xffffffff).to_bytes(4, 'little')
        return r

    def signature_segwit(self, sign_id, script, hash_type=SIGHASH_ALL, amount=0):
        """
        Serialize transaction signature for segregated witness transaction as defined in BIP143

        :return bytes: Segwit transaction signature preimage
        """
        base_type = hash_type & 0x1f
        anyonecanpay = hash_type & SIGHASH_ANYONECANPAY
        hash_prevouts = b'\0' * 32
        hash_sequence = b'\0' * 32
        hash_outputs = b'\0' * 32

        if not anyonecanpay:
            hash_prevouts = double_sha256(b''.join([i.outpoint() for i in self.inputs]))
            if base_type != SIGHASH_SINGLE and base_type != SIGHASH_NONE:
                hash_sequence = double_sha256(b''.join([i.sequence.to_bytes(4, 'little') for i in self.inputs]))
        if base_type != SIGHASH_SINGLE and base_type != SIGHASH_NONE:
            hash_outputs = double_sha256(b''.join([o.raw() for o in self.outputs]))
        elif base_type == SIGHASH_SINGLE and sign_id < len(self.outputs):
            hash_outputs = double_sha256(self.outputs[sign_id].raw())

        inp = self.inputs[sign_id]
        return (self.version & 0xffffffff).to_bytes(4, 'little') + hash_prevouts + hash_sequence + \
            inp.outpoint() + varstr(script) + amount.to_bytes(8, 'little') + inp.sequence.to_bytes(4, 'little') + \
            hash_outputs + self.locktime.to_bytes(4, 'little') + (hash_type & 0xffffffff).to_bytes(4, 'little')

    def sign_input(self, key, sign_id, script, amount=0, hash_type=SIGHASH_ALL):
        """
        Sign input with private key and add the signature to the transaction.

        The script is the locking script of the output spent by this input. P2SH scripts are signed as
        P2SH-P2WPKH of the given key, P2WPKH and P2SH-P2WPKH inputs use segwit signatures over the amount.

        The input is only updated when the result is SignResult.OK. The signature is returned whenever it could be
        created, also for unknown script types.

        :param key: Private key
        :type key: Key
        :param sign_id: Index of input to sign
        :type sign_id: int
        :param script: Locking script of output spent
        :type script: bytes
        :param amount: Value of output spent
        :type amount: int
        :param hash_type: Specific hash type, default is SIGHASH_ALL
        :type hash_type: int

        :return tuple: SignResult and Signature or None
        """
        if not 0 <= sign_id < len(self.inputs):
            return SignResult.INPUTINDEX_OUT_OF_RANGE, None
        if not script:
            return SignResult.INVALID_TX_OR_SCRIPT, None
        if not key.is_private:
            return SignResult.INVALID_KEY, None

        script_type, solutions = Script.classify(script)
        script_code = script
        sigversion = SIGNATURE_VERSION_STANDARD
        redeemscript = None
        if script_type == 'p2sh':
            redeemscript = key.p2wpkh_redeemscript()
            if hash160(redeemscript) != solutions[0]:
                return SignResult.NO_KEY_MATCH, None
            script_code = script_p2pkh(key.hash160)
            sigversion = SIGNATURE_VERSION_SEGWIT
        elif script_type == 'p2pkh':
            if solutions[0] != key.hash160:
                return SignResult.NO_KEY_MATCH, None
        elif script_type == 'p2wpkh':
            if solutions[0] != key.hash160:
                return SignResult.NO_KEY_MATCH, None
            script_code = script_p2pkh(solutions[0])
            sigversion = SIGNATURE_VERSION_SEGWIT

        try:
            digest = self.signature_hash(sign_id, script_code, hash_type, amount, sigversion)
        except TransactionError:
            return SignResult.SIGHASH_FAILED, None
        try:
            sig = Signature.create(digest, key, hash_type)
            der = sig.as_der_encoded(key.ecc)
        except BKeyError:
            return SignResult.INVALID_KEY, None

        inp = self.inputs[sign_id]
        if script_type == 'p2pkh':
            inp.unlocking_script = data_pack(der) + data_pack(key.public_byte)
        elif script_type == 'p2pk':
            inp.unlocking_script = data_pack(der)
        elif script_type == 'p2wpkh':
            inp.unlocking_script = b''
            inp.witnesses = [der, key.public_byte]
        elif script_type == 'p2sh':
            inp.unlocking_script = data_pack(redeemscript)
            inp.witnesses = [der, key.public_byte]
        else:
            _logger.warning("Signature created but script type %s is not supported for input %d" %
                            (script_type, sign_id))
            return SignResult.UNKNOWN_SCRIPT_TYPE, sig
        return SignResult.OK, sig
