# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    SIGNING - Signature hash calculation and transaction input signing pipeline
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

from bitcointool.encoding import *
from bitcointool.keys import BKeyError, Key
from bitcointool.networks import Network
from bitcointool.scripts import Script, ScriptError
from bitcointool.secure import SecureBuffer
from bitcointool.transactions import SignResult, Transaction, TransactionError

_logger = logging.getLogger(__name__)


class SigningOutcome(enum.Enum):
    SIGNED = 'signed'
    SKIPPED = 'skipped'
    FAILED = 'failed'


class SigningError(ToolError):
    """
    Raised when signing cannot continue after the signature hash was calculated. The report contains the script
    and sighash information calculated so far.
    """
    def __init__(self, kind, msg, report):
        self.report = report
        super(SigningError, self).__init__(kind, msg)


class SigningReport(object):
    """
    Everything the signing pipeline calculated for one input: script and sighash information, and if a private key
    was provided the signature and the signed transaction.
    """

    def __init__(self, script, script_type, input_index, hash_type, sighash):
        self.script = script
        self.script_type = script_type
        self.input_index = input_index
        self.hash_type = hash_type
        self.sighash = sighash
        self.outcome = SigningOutcome.SKIPPED
        self.sign_result = None
        self.signature_compact = None
        self.signature_der = None
        self.signed_tx = None

    def __repr__(self):
        return "<SigningReport(input=%d, outcome=%s)>" % (self.input_index, self.outcome.value)

    @property
    def sighash_hex(self):
        """
        Signature hash in reversed byte order, the way hashes are displayed

        :return str:
        """
        return reversed_hex(self.sighash)

    @property
    def signed_tx_hex(self):
        return self.signed_tx.hex() if self.signed_tx is not None else None


class SignaturePipeline(object):
    """
    Calculate the signature hash of a transaction input and optionally sign it.

    The steps are validation of the arguments, transaction deserialization, input index check, script decoding,
    legacy sighash calculation, script classification and, if a WIF private key is given, signing and serialization
    of the signed transaction. A ToolError is raised on the first failing step, a failed signature is reported in
    the SigningReport with outcome FAILED.

    Private key material is cleared when the pipeline finishes, also when an error occurs.
    """

    def __init__(self, ecc, network=DEFAULT_NETWORK, max_tx_hex_length=None):
        self.ecc = ecc
        self.network = Network(network)
        self.max_tx_hex_length = max_tx_hex_length or MAX_TX_HEX_LENGTH

    def _validate(self, tx_hex, script_hex):
        if not tx_hex or not script_hex:
            raise ToolError(ErrorKind.MISSING_ARGUMENT, "Missing tx-hex or script-hex (use -x, -s)")
        if len(tx_hex) > self.max_tx_hex_length:
            raise ToolError(ErrorKind.INPUT_TOO_LARGE,
                            "tx too large (max %d hex characters)" % self.max_tx_hex_length)

    @staticmethod
    def _deserialize(tx_hex):
        try:
            return Transaction.parse_hex(tx_hex)
        except (TransactionError, EncodingError):
            raise ToolError(ErrorKind.INVALID_TRANSACTION, "Invalid tx hex")

    @staticmethod
    def _decode_script(script_hex):
        try:
            return Script.parse_hex(script_hex)
        except ScriptError:
            raise ToolError(ErrorKind.INVALID_ENCODING, "Invalid script hex")

    def _decode_key(self, wif_buffer, report):
        """
        Decode WIF private key. Returns None if the key cannot be decoded and is not longer than WIF_MIN_LENGTH
        characters, so signing is skipped. Longer keys which fail to decode raise a SigningError with the report.
        """
        if not len(wif_buffer):
            return None
        try:
            return Key.from_wif(wif_buffer.text(), self.ecc, self.network)
        except (BKeyError, UnicodeDecodeError):
            if len(wif_buffer) > WIF_MIN_LENGTH:
                raise SigningError(ErrorKind.INVALID_ENCODING, "Invalid wif privkey", report)
            return None

    def run(self, tx_hex, script_hex, input_index=0, hash_type=SIGHASH_ALL, amount=0, wif=None):
        """
        Run signing pipeline for transaction input

        :param tx_hex: Raw transaction in hexadecimal format
        :type tx_hex: str
        :param script_hex: Locking script of the output spent by the input, hexadecimal
        :type script_hex: str
        :param input_index: Index of input to sign
        :type input_index: int
        :param hash_type: Sighash type, default is SIGHASH_ALL
        :type hash_type: int
        :param amount: Value of output spent in satoshi, needed for segwit inputs
        :type amount: int
        :param wif: Private key in Wallet Import Format. Signing is skipped when omitted
        :type wif: str, bytes, SecureBuffer, None

        :return SigningReport:
        """
        wif_buffer = wif if isinstance(wif, SecureBuffer) else SecureBuffer(wif or b'')
        key = None
        try:
            self._validate(tx_hex, script_hex)
            tx = self._deserialize(tx_hex)
            if not 0 <= input_index < len(tx.inputs):
                raise ToolError(ErrorKind.INDEX_OUT_OF_RANGE, "Inputindex out of range")
            script = self._decode_script(script_hex)
            try:
                sighash = tx.signature_hash(input_index, script.raw, hash_type, 0, SIGNATURE_VERSION_STANDARD)
            except TransactionError as e:
                raise ToolError(ErrorKind.OPERATION_FAILED, "Signature hash calculation failed: %s" % e)
            report = SigningReport(script.hex(), script.script_type, input_index, hash_type, sighash)

            key = self._decode_key(wif_buffer, report)
            wif_buffer.clear()
            if key is None:
                _logger.info("No private key provided, signing of input %d skipped" % input_index)
                return report
            if amount < 0:
                raise SigningError(ErrorKind.INVALID_ENCODING, "Amount must be a positive integer", report)

            result, sig = tx.sign_input(key, input_index, script.raw, amount, hash_type)
            report.sign_result = result
            if sig is not None:
                report.signature_compact = sig.compact()
                report.signature_der = sig.as_der_encoded(self.ecc)
            if result == SignResult.OK:
                report.outcome = SigningOutcome.SIGNED
            else:
                _logger.warning("Signing input %d failed: %s" % (input_index, result))
                report.outcome = SigningOutcome.FAILED
            report.signed_tx = tx.raw()
            return report
        finally:
            wif_buffer.clear()
            if key is not None:
                key.clear()
