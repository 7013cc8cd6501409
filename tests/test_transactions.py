# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    Unit Tests for Transaction parsing, signature hashes and signing
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

import unittest

from bitcointool.transactions import *
from bitcointool.scripts import *
from bitcointool.keys import Key
from bitcointool.ecc import EccContext

# BIP143 native P2WPKH example
P2WPKH_TX = '0100000002fff7f7881a8099afa6940d42d1e7f6362bec38171ea3edf433541db4e4ad969f0000000000eeffffffef51e1b804' \
            'cc89d182d279655c3aa89e815b1b309fe287d9b2b55d57b90ec68a0100000000ffffffff02202cb206000000001976a914828' \
            '0b37df378db99f66f85c95a783a76ac7a6d5988ac9093510d000000001976a9143bde42dbee7e4dbe6a21b2d50ce2f0167faa' \
            '815988ac11000000'
P2WPKH_KEY = '619c335025c7f4012e556c2a58b2506e30b8511b53ade95ea316fd8c3286feb9'
P2WPKH_HASH = '1d0f172a0ecb48aee1be1f2687d2963ae33f71a1'

# BIP143 P2SH-P2WPKH example
P2SH_TX = '0100000001db6b1b20aa0fd7b23880be2ecbd4a98130974cf4748fb66092ac4d3ceb1a54770100000000feffffff02b8b4eb0b0' \
          '00000001976a914a457b684d7f0d539a46a45bbc043f35b59d0d96388ac0008af2f000000001976a914fd270b1ee6abcaea97fea7' \
          'ad0402e8bd8ad6d77c88ac92040000'
P2SH_KEY = 'eb696a065ef48a2192da5b28b694f87544b30fae8327c4510137a922f32c6dcf'
P2SH_SCRIPT = 'a9144733f37cf4db86fbc2efed2500b4f4e49f31202387'

# Signed mainnet transactions with a single P2PKH input
LEGACY_TX_UNCOMPRESSED = '010000000182406edfc43449e2f94097867316cbc631dfdf9dc57dcc125297b0b59d3a2eda240000008b4830' \
                         '45022100e05371e4d640d351d62699573811d93858b057eb01852d6c0b45d21d0ee90bb102201dc0b5ae1fee' \
                         '4dc1e7787e5cbbba2021387f52a9368856386931d4f8d9bdd938014104c4b7a7f7bb2c899f4aeab75b41567c' \
                         '040ae79506d43ee72f650c95b6319e47402f0ba88d1c5a294d075885442679dc24882ea37c31e0dbc82cfd51' \
                         'ed185d7e94ffffffff02ab4b0000000000001976a914ee493bd17ae7fa7fdabe4adb2b861ad7a8b954ad88ac' \
                         'c5a5e70b000000001976a9147ddb236e7877d5040e2a59e4be544c65934e573a88ac00000000'
LEGACY_TX_COMPRESSED = '0100000001eccf7e3034189b851985d871f91384b8ee357cd47c3024736e5676eb2debb3f2010000006a4730' \
                       '4402202a72b6a533582895e102add2e189188b9ab3779b20ae9535f5444196b150489c022042b1db0a2a76a7' \
                       '5985264c0eb967af849a22e2af79c38048457dbc6c3d97c3e801210250863ad64a87ae8a2fe83c1af1a8403c' \
                       'b53f53e486d8511dad8a04887e5b2352ffffffff01605af405000000001976a914097072524438d003d23a2f' \
                       '23edb65aae1bb3e46988ac00000000'


def _legacy_transaction(n_inputs=2, n_outputs=1):
    inputs = [Input(bytes([n + 1]) * 32, n, sequence=0xfffffffe - n, index_n=n) for n in range(n_inputs)]
    outputs = [Output(10000 * (n + 1), script_p2pkh(bytes([n]) * 20), n) for n in range(n_outputs)]
    return Transaction(inputs, outputs, locktime=0)


class TestTransactionParse(unittest.TestCase):

    def test_transaction_parse(self):
        t = Transaction.parse_hex(P2WPKH_TX)
        self.assertEqual(2, len(t.inputs))
        self.assertEqual(2, len(t.outputs))
        self.assertEqual(1, t.version)
        self.assertEqual(17, t.locktime)
        self.assertEqual(0xffffffee, t.inputs[0].sequence)
        self.assertEqual(1, t.inputs[1].output_n)
        self.assertEqual(112340000, t.outputs[0].value)
        self.assertEqual('p2pkh', t.outputs[1].script_type)
        self.assertEqual('9f96ade4b41d5433f4eda31e1738ec2b36f6e7d1420d94a6af99801a88f7f7ff', t.inputs[0].prev_txid)
        self.assertFalse(t.has_witness)

    def test_transaction_serialize(self):
        self.assertEqual(P2WPKH_TX, Transaction.parse_hex(P2WPKH_TX).raw_hex())
        self.assertEqual(P2SH_TX, Transaction.parse_hex(P2SH_TX).raw_hex())

    def test_transaction_witness_serialize(self):
        t = Transaction.parse_hex(P2SH_TX)
        t.inputs[0].witnesses = [b'\1\2', b'\3']
        rawtx = t.raw_hex()
        self.assertEqual('01000000' + '0001', rawtx[:12])
        t2 = Transaction.parse_hex(rawtx)
        self.assertEqual([b'\1\2', b'\3'], t2.inputs[0].witnesses)
        self.assertEqual(t, t2)
        self.assertEqual(P2SH_TX, t2.raw_hex(include_witness=False))

    def test_transaction_parse_trailing_data(self):
        self.assertRaisesRegex(TransactionError, "extra data found after locktime", Transaction.parse_hex,
                               P2WPKH_TX + '00')

    def test_transaction_parse_truncated(self):
        self.assertRaisesRegex(TransactionError, "Invalid transaction size", Transaction.parse_hex, P2WPKH_TX[:-10])
        self.assertRaises(TransactionError, Transaction.parse_hex, '')

    def test_transaction_parse_invalid_hex(self):
        self.assertRaisesRegex(TransactionError, "Invalid transaction hex", Transaction.parse_hex, P2WPKH_TX + '0')
        self.assertRaisesRegex(TransactionError, "Invalid transaction hex", Transaction.parse_hex, 'xyz0')

    def test_transaction_parse_unknown_flag(self):
        self.assertRaisesRegex(TransactionError, "Unknown transaction flag", Transaction.parse_hex,
                               P2WPKH_TX[:8] + '0002' + P2WPKH_TX[8:])


class TestTransactionSignatureHash(unittest.TestCase):

    def test_signature_hash_segwit_p2wpkh(self):
        t = Transaction.parse_hex(P2WPKH_TX)
        sighash = t.signature_hash(1, script_p2pkh(bytes.fromhex(P2WPKH_HASH)), SIGHASH_ALL, 600000000,
                                   SIGNATURE_VERSION_SEGWIT)
        self.assertEqual('c37af31116d1b27caf68aae9e3ac82f1477929014d5b917657d0eb49478cb670', sighash.hex())

    def test_signature_hash_segwit_p2sh_p2wpkh(self):
        t = Transaction.parse_hex(P2SH_TX)
        script_code = script_p2pkh(bytes.fromhex('79091972186c449eb1ded22b78e40d009bdf0089'))
        sighash = t.signature_hash(0, script_code, SIGHASH_ALL, 1000000000, SIGNATURE_VERSION_SEGWIT)
        self.assertEqual('64f3b0f4dd2bb3aa1ce8566d220cc74dda9df97d8490cc81d89d735c92e59fb6', sighash.hex())

    def test_signature_hash_segwit_amount(self):
        t = Transaction.parse_hex(P2WPKH_TX)
        script_code = script_p2pkh(bytes.fromhex(P2WPKH_HASH))
        self.assertNotEqual(t.signature_hash(1, script_code, SIGHASH_ALL, 600000000, SIGNATURE_VERSION_SEGWIT),
                            t.signature_hash(1, script_code, SIGHASH_ALL, 600000001, SIGNATURE_VERSION_SEGWIT))
        self.assertRaisesRegex(TransactionError, "Amount must be a positive", t.signature_hash, 1, script_code,
                               SIGHASH_ALL, -1, SIGNATURE_VERSION_SEGWIT)

    def test_signature_hash_legacy_single_out_of_range(self):
        t = _legacy_transaction(n_inputs=2, n_outputs=1)
        self.assertEqual((1).to_bytes(32, 'little'), t.signature_hash(1, script_p2pkh(b'\0' * 20), SIGHASH_SINGLE))
        self.assertNotEqual((1).to_bytes(32, 'little'),
                            t.signature_hash(0, script_p2pkh(b'\0' * 20), SIGHASH_SINGLE))

    def test_signature_hash_legacy_hash_types(self):
        t = _legacy_transaction(n_inputs=2, n_outputs=2)
        script = script_p2pkh(b'\0' * 20)
        hashes = set()
        for hash_type in [SIGHASH_ALL, SIGHASH_NONE, SIGHASH_SINGLE, SIGHASH_ALL | SIGHASH_ANYONECANPAY,
                          SIGHASH_NONE | SIGHASH_ANYONECANPAY, SIGHASH_SINGLE | SIGHASH_ANYONECANPAY]:
            sighash = t.signature_hash(0, script, hash_type)
            self.assertEqual(sighash, t.signature_hash(0, script, hash_type))
            hashes.add(sighash)
        self.assertEqual(6, len(hashes))

    def test_signature_hash_legacy_none_ignores_outputs(self):
        t = _legacy_transaction(n_inputs=1, n_outputs=2)
        script = script_p2pkh(b'\0' * 20)
        sighash_none = t.signature_hash(0, script, SIGHASH_NONE)
        sighash_all = t.signature_hash(0, script, SIGHASH_ALL)
        t.outputs[1].value = 1
        self.assertEqual(sighash_none, t.signature_hash(0, script, SIGHASH_NONE))
        self.assertNotEqual(sighash_all, t.signature_hash(0, script, SIGHASH_ALL))

    def test_signature_hash_legacy_anyonecanpay_ignores_other_inputs(self):
        t = _legacy_transaction(n_inputs=2, n_outputs=1)
        script = script_p2pkh(b'\0' * 20)
        sighash = t.signature_hash(0, script, SIGHASH_ALL | SIGHASH_ANYONECANPAY)
        t.inputs[1].sequence = 0
        self.assertEqual(sighash, t.signature_hash(0, script, SIGHASH_ALL | SIGHASH_ANYONECANPAY))

    def test_signature_hash_legacy_codeseparator(self):
        t = _legacy_transaction()
        script = script_p2pkh(b'\0' * 20)
        script_with_separators = bytes([op.op_codeseparator]) + script + bytes([op.op_codeseparator])
        self.assertEqual(t.signature_hash(0, script), t.signature_hash(0, script_with_separators))

    def test_signature_hash_does_not_modify_transaction(self):
        t = Transaction.parse_hex(P2WPKH_TX)
        t.signature_hash(0, script_p2pkh(b'\0' * 20), SIGHASH_SINGLE | SIGHASH_ANYONECANPAY)
        self.assertEqual(P2WPKH_TX, t.raw_hex())

    def test_signature_hash_index_out_of_range(self):
        t = _legacy_transaction()
        self.assertRaisesRegex(TransactionError, "out of range", t.signature_hash, 2, b'\x51')
        self.assertRaisesRegex(TransactionError, "out of range", t.signature_hash, -1, b'\x51')


class TestTransactionLegacySignatureHash(unittest.TestCase):

    def setUp(self):
        self.ecc = EccContext().start()

    def tearDown(self):
        self.ecc.stop()

    def _verify_first_input(self, t):
        (_, sig_der, _), (_, public_byte, _) = script_commands(t.inputs[0].unlocking_script)
        key = Key.from_public_hex(public_byte.hex(), self.ecc)
        sighash = t.signature_hash(0, script_p2pkh(hash160(public_byte)), sig_der[-1])
        r, s = self.ecc.der_decode(sig_der[:-1])
        return self.ecc.verify_digest(key.public_point(), sighash, r, s)

    def test_signature_hash_legacy_mainnet_signatures(self):
        for rawtx in [LEGACY_TX_UNCOMPRESSED, LEGACY_TX_COMPRESSED]:
            t = Transaction.parse_hex(rawtx)
            self.assertTrue(self._verify_first_input(t), msg="Signature of input 0 of %s not valid" % rawtx[:20])
            t.outputs[0].value += 1
            self.assertFalse(self._verify_first_input(t))

    def test_signature_hash_legacy_preimage_single(self):
        t = _legacy_transaction(n_inputs=2, n_outputs=2)
        script = script_p2pkh(b'\0' * 20)
        preimage = '01000000' + '02' + \
                   '01' * 32 + '00000000' + '00' + '00000000' + \
                   '02' * 32 + '01000000' + '19' + script.hex() + 'fdffffff' + \
                   '02' + 'ff' * 8 + '00' + '204e000000000000' + '19' + script_p2pkh(b'\1' * 20).hex() + \
                   '00000000' + '03000000'
        self.assertEqual(preimage, t.signature(1, script, SIGHASH_SINGLE).hex())
        self.assertEqual(double_sha256(bytes.fromhex(preimage)), t.signature_hash(1, script, SIGHASH_SINGLE))

    def test_signature_hash_legacy_preimage_all_anyonecanpay(self):
        t = _legacy_transaction(n_inputs=2, n_outputs=2)
        script = script_p2pkh(b'\0' * 20)
        hash_type = SIGHASH_ALL | SIGHASH_ANYONECANPAY
        preimage = '01000000' + '01' + \
                   '02' * 32 + '01000000' + '19' + script.hex() + 'fdffffff' + \
                   '02' + '1027000000000000' + '19' + script.hex() + \
                   '204e000000000000' + '19' + script_p2pkh(b'\1' * 20).hex() + \
                   '00000000' + '81000000'
        self.assertEqual(preimage, t.signature(1, script, hash_type).hex())
        self.assertEqual(double_sha256(bytes.fromhex(preimage)), t.signature_hash(1, script, hash_type))


class TestTransactionSign(unittest.TestCase):

    def setUp(self):
        self.ecc = EccContext().start()

    def tearDown(self):
        self.ecc.stop()

    def test_sign_input_p2wpkh(self):
        t = Transaction.parse_hex(P2WPKH_TX)
        k = Key(bytes.fromhex(P2WPKH_KEY), ecc=self.ecc)
        self.assertEqual(P2WPKH_HASH, k.hash160.hex())
        result, sig = t.sign_input(k, 1, script_p2wpkh(k.hash160), 600000000)
        self.assertEqual(SignResult.OK, result)
        sighash = bytes.fromhex('c37af31116d1b27caf68aae9e3ac82f1477929014d5b917657d0eb49478cb670')
        self.assertTrue(sig.verify(sighash, k))
        self.assertEqual(b'', t.inputs[1].unlocking_script)
        self.assertEqual([sig.as_der_encoded(self.ecc), k.public_byte], t.inputs[1].witnesses)
        self.assertEqual('025476c2e83188368da1ff3e292e7acafcdb3566bb0ad253f62fc70f07aeee6357',
                         t.inputs[1].witnesses[1].hex())
        self.assertTrue(t.has_witness)

    def test_sign_input_p2sh_p2wpkh(self):
        t = Transaction.parse_hex(P2SH_TX)
        k = Key(bytes.fromhex(P2SH_KEY), ecc=self.ecc)
        result, sig = t.sign_input(k, 0, bytes.fromhex(P2SH_SCRIPT), 1000000000)
        self.assertEqual(SignResult.OK, result)
        sighash = bytes.fromhex('64f3b0f4dd2bb3aa1ce8566d220cc74dda9df97d8490cc81d89d735c92e59fb6')
        self.assertTrue(sig.verify(sighash, k))
        self.assertEqual('16001479091972186c449eb1ded22b78e40d009bdf0089', t.inputs[0].unlocking_script.hex())
        self.assertEqual(2, len(t.inputs[0].witnesses))

    def test_sign_input_p2pkh(self):
        k = Key((1).to_bytes(32, 'big'), ecc=self.ecc)
        t = _legacy_transaction()
        script = script_p2pkh(k.hash160)
        result, sig = t.sign_input(k, 1, script, hash_type=SIGHASH_NONE)
        self.assertEqual(SignResult.OK, result)
        self.assertEqual(SIGHASH_NONE, sig.hash_type)
        self.assertTrue(sig.verify(t.signature_hash(1, script, SIGHASH_NONE), k))
        der = sig.as_der_encoded(self.ecc)
        self.assertEqual(data_pack(der) + data_pack(k.public_byte), t.inputs[1].unlocking_script)
        self.assertEqual(b'', t.inputs[0].unlocking_script)
        self.assertEqual(t, Transaction.parse_hex(t.raw_hex()))

    def test_sign_input_no_key_match(self):
        k = Key((1).to_bytes(32, 'big'), ecc=self.ecc)
        t = _legacy_transaction()
        rawtx = t.raw()
        self.assertEqual((SignResult.NO_KEY_MATCH, None), t.sign_input(k, 0, script_p2pkh(b'\0' * 20)))
        self.assertEqual((SignResult.NO_KEY_MATCH, None), t.sign_input(k, 0, script_p2wpkh(b'\0' * 20)))
        self.assertEqual((SignResult.NO_KEY_MATCH, None), t.sign_input(k, 0, script_p2sh(b'\0' * 20)))
        self.assertEqual(rawtx, t.raw())

    def test_sign_input_errors(self):
        k = Key((1).to_bytes(32, 'big'), ecc=self.ecc)
        t = _legacy_transaction()
        self.assertEqual((SignResult.INPUTINDEX_OUT_OF_RANGE, None), t.sign_input(k, 2, script_p2pkh(k.hash160)))
        self.assertEqual((SignResult.INVALID_TX_OR_SCRIPT, None), t.sign_input(k, 0, b''))
        public_key = Key.from_public_hex(k.public_hex, self.ecc)
        self.assertEqual((SignResult.INVALID_KEY, None), t.sign_input(public_key, 0, script_p2pkh(k.hash160)))

    def test_sign_input_unknown_script_type(self):
        k = Key((1).to_bytes(32, 'big'), ecc=self.ecc)
        t = _legacy_transaction()
        rawtx = t.raw()
        result, sig = t.sign_input(k, 0, bytes([op.op_1]))
        self.assertEqual(SignResult.UNKNOWN_SCRIPT_TYPE, result)
        self.assertIsNotNone(sig)
        self.assertEqual(rawtx, t.raw())
        self.assertEqual('UNKNOWN_SCRIPT_TYPE', str(result))


class TestScripts(unittest.TestCase):

    def test_script_types(self):
        self.assertEqual('p2pkh', Script(script_p2pkh(b'\1' * 20)).script_type)
        self.assertEqual('p2sh', Script(script_p2sh(b'\1' * 20)).script_type)
        self.assertEqual('p2wpkh', Script(script_p2wpkh(b'\1' * 20)).script_type)
        self.assertEqual('p2wsh', Script(bytes([op.op_0]) + data_pack(b'\1' * 32)).script_type)
        self.assertEqual('p2tr', Script(bytes([op.op_1]) + data_pack(b'\1' * 32)).script_type)
        self.assertEqual('nulldata', Script(bytes([op.op_return]) + data_pack(b'test')).script_type)
        self.assertEqual('nonstandard', Script(b'').script_type)
        self.assertEqual('nonstandard', Script(bytes([op.op_dup])).script_type)

    def test_script_p2pk(self):
        pub = bytes.fromhex('0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798')
        s = Script(data_pack(pub) + bytes([op.op_checksig]))
        self.assertEqual('p2pk', s.script_type)
        self.assertEqual([pub], s.solutions)

    def test_script_multisig(self):
        pub = bytes.fromhex('0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798')
        s = Script(bytes([op.op_1]) + data_pack(pub) + data_pack(pub) + bytes([op.op_2, op.op_checkmultisig]))
        self.assertEqual('multisig', s.script_type)
        self.assertEqual(b'\1', s.solutions[0])
        self.assertEqual(b'\2', s.solutions[-1])

    def test_script_parse_hex(self):
        s = Script.parse_hex(P2SH_SCRIPT)
        self.assertEqual('p2sh', s.script_type)
        self.assertEqual(P2SH_SCRIPT, s.hex())
        self.assertRaisesRegex(ScriptError, "Invalid script hex", Script.parse_hex, 'a9z')

    def test_script_commands(self):
        commands = script_commands(bytes.fromhex('4c0201027651'))
        self.assertEqual([(op.op_pushdata1, b'\1\2', 0), (op.op_dup, None, 4), (op.op_1, None, 5)], commands)
        self.assertRaisesRegex(ScriptError, "not enough data", script_commands, bytes.fromhex('0501'))
        self.assertRaisesRegex(ScriptError, "push length missing", script_commands, bytes.fromhex('4d01'))

    def test_script_remove_codeseparators(self):
        self.assertEqual('76', script_remove_codeseparators(bytes.fromhex('ab76ab')).hex())
        # Pushed data is copied unchanged
        self.assertEqual('01ab76', script_remove_codeseparators(bytes.fromhex('01ab76ab')).hex())
        self.assertEqual('760501ab', script_remove_codeseparators(bytes.fromhex('76ab0501ab')).hex())

    def test_script_str(self):
        self.assertEqual('OP_DUP OP_HASH160 ' + '01' * 20 + ' OP_EQUALVERIFY OP_CHECKSIG',
                         str(Script(script_p2pkh(b'\1' * 20))))
        self.assertEqual('OP_0 ' + '02' * 20, str(Script(script_p2wpkh(b'\2' * 20))))
        self.assertEqual('0501', str(Script(bytes.fromhex('0501'))))

    def test_data_pack(self):
        self.assertEqual('4c4c', data_pack(b'\0' * 76).hex()[:4])
        self.assertEqual('4d0001', data_pack(b'\0' * 256).hex()[:6])


if __name__ == '__main__':
    unittest.main()
