# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    NETWORK class reads network definitions and with helper methods
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

import json
from bitcointool.encoding import *


_logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """
    Network Exception class
    """
    def __init__(self, msg=''):
        self.msg = msg
        _logger.error(msg)

    def __str__(self):
        return self.msg


def _read_network_definitions():
    """
    Returns network definitions from json file in the package data dir

    :return dict: Network definitions
    """

    fn = Path(BCT_INSTALL_DIR, 'data', 'networks.json')
    with fn.open() as f:
        try:
            network_definitions = json.loads(f.read())
        except json.decoder.JSONDecodeError as e:
            raise NetworkError("Error reading network definitions from %s: %s" % (fn, e))
    return network_definitions


NETWORK_DEFINITIONS = _read_network_definitions()


class Network(object):
    """
    Network class with all network definitions.

    Prefixes for WIF, P2SH, HD public and private keys and addresses and the bech32 human-readable part.

    """

    def __init__(self, network_name=DEFAULT_NETWORK):
        if isinstance(network_name, Network):
            network_name = network_name.name
        if network_name not in NETWORK_DEFINITIONS:
            raise NetworkError("Network %s not found in network definitions" % network_name)
        self.name = network_name

        self.prefix_address_p2sh = bytes.fromhex(NETWORK_DEFINITIONS[network_name]['prefix_address_p2sh'])
        self.prefix_address = bytes.fromhex(NETWORK_DEFINITIONS[network_name]['prefix_address'])
        self.prefix_bech32 = NETWORK_DEFINITIONS[network_name]['prefix_bech32']
        self.prefix_wif = bytes.fromhex(NETWORK_DEFINITIONS[network_name]['prefix_wif'])
        self.prefix_hdkey_private = bytes.fromhex(NETWORK_DEFINITIONS[network_name]['prefix_hdkey_private'])
        self.prefix_hdkey_public = bytes.fromhex(NETWORK_DEFINITIONS[network_name]['prefix_hdkey_public'])

    def __repr__(self):
        return "<Network: %s>" % self.name

    def __eq__(self, other):
        if isinstance(other, str):
            return self.name == other
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)
