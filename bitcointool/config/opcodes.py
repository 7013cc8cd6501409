# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    Script opcode definitions
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


_opcodes = [
    ("OP_0", 0), ("OP_PUSHDATA1", 76), "OP_PUSHDATA2", "OP_PUSHDATA4", "OP_1NEGATE", "OP_RESERVED", "OP_1",
    "OP_2", "OP_3", "OP_4", "OP_5", "OP_6", "OP_7", "OP_8", "OP_9", "OP_10", "OP_11", "OP_12", "OP_13", "OP_14",
    "OP_15", "OP_16", "OP_NOP", "OP_VER", "OP_IF", "OP_NOTIF", "OP_VERIF", "OP_VERNOTIF", "OP_ELSE", "OP_ENDIF",
    "OP_VERIFY", "OP_RETURN", ("OP_DROP", 117), "OP_DUP", ("OP_EQUAL", 135), "OP_EQUALVERIFY",
    ("OP_HASH160", 169), "OP_HASH256", "OP_CODESEPARATOR", "OP_CHECKSIG", "OP_CHECKSIGVERIFY", "OP_CHECKMULTISIG",
    "OP_CHECKMULTISIGVERIFY", ("OP_INVALIDOPCODE", 0xFF)
]


def _set_opcodes():
    count = 0
    cds = {}
    cds_rev = {}
    for opcode in _opcodes:
        if isinstance(opcode, tuple):
            var, count = opcode
        else:
            var = opcode
        cds.update({count: var})
        cds_rev.update({var: count})
        count += 1
    return cds, cds_rev


opcodenames, opcodes = _set_opcodes()


class op:
    """
    Namespace with integer values of the opcodes used by the script builders, i.e. op.op_dup == 0x76
    """
    pass


for _name, _value in opcodes.items():
    setattr(op, _name.lower(), _value)
