# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    CONFIG - Configuration settings
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

import os
import configparser
from .opcodes import *
from pathlib import Path

# General defaults
TYPE_TEXT = str
LOGLEVEL = 'WARNING'

# File locations
BCT_CONFIG_FILE = ''
BCT_INSTALL_DIR = Path(__file__).parents[1]
BCT_DATA_DIR = ''
BCT_LOG_FILE = ''

# Main
ENABLE_BITCOINTOOL_LOGGING = False

# Transactions
SIGHASH_ALL = 1
SIGHASH_NONE = 2
SIGHASH_SINGLE = 3
SIGHASH_ANYONECANPAY = 0x80

SIGNATURE_VERSION_STANDARD = 0
SIGNATURE_VERSION_SEGWIT = 1

SEQUENCE_FINAL = 0xffffffff

# Maximum length of transaction hex accepted by the sign command
MAX_TX_HEX_LENGTH = 204800
# Maximum size in bytes of a DER encoded signature including the sighash type byte
MAX_DER_SIGNATURE_SIZE = 75

# Keys / Addresses
WIF_MIN_LENGTH = 50
COMPACT_SIGNATURE_HEX_LENGTH = 128
HD_SEED_SIZE = 32

# Key paths
KEYPATH_MAX_LENGTH = 1024
KEYPATH_RANGE_MAX_DIGITS = 8
KEYPATH_HARDENED_MARKERS = "'HhPp"
DERIVATION_FAILURE_POLICIES = ['abort', 'continue']
DERIVATION_FAILURE_POLICY = 'abort'

# Networks
DEFAULT_NETWORK = 'bitcoin'
SUPPORTED_NETWORKS = ['bitcoin', 'testnet', 'regtest']

def read_config():
    config = configparser.ConfigParser()

    def config_get(section, var, fallback, is_boolean=False):
        try:
            if is_boolean:
                val = config.getboolean(section, var, fallback=fallback)
            else:
                val = config.get(section, var, fallback=fallback)
            return val
        except (ValueError, configparser.Error):
            return fallback

    global BCT_CONFIG_FILE, BCT_DATA_DIR, BCT_LOG_FILE, LOGLEVEL, ENABLE_BITCOINTOOL_LOGGING
    global DEFAULT_NETWORK, DERIVATION_FAILURE_POLICY, MAX_TX_HEX_LENGTH, KEYPATH_MAX_LENGTH

    # Read settings from configuration file provided in OS environment or ~/.bitcointool/ directory
    config_file_name = os.environ.get('BCT_CONFIG_FILE')
    if not config_file_name:
        BCT_CONFIG_FILE = Path('~/.bitcointool/config.ini').expanduser()
    else:
        BCT_CONFIG_FILE = Path(config_file_name)
        if not BCT_CONFIG_FILE.is_absolute():
            BCT_CONFIG_FILE = Path(Path.home(), '.bitcointool', BCT_CONFIG_FILE)
        if not BCT_CONFIG_FILE.exists():
            BCT_CONFIG_FILE = Path(BCT_INSTALL_DIR, 'data', config_file_name)
        if not BCT_CONFIG_FILE.exists():
            raise IOError('Bitcointool configuration file not found: %s' % str(BCT_CONFIG_FILE))
    data = config.read(str(BCT_CONFIG_FILE))
    BCT_DATA_DIR = Path(config_get('locations', 'data_dir', fallback='~/.bitcointool')).expanduser()

    # Log settings
    ENABLE_BITCOINTOOL_LOGGING = config_get("logs", "enable_bitcointool_logging", fallback=False, is_boolean=True)
    BCT_LOG_FILE = Path(BCT_DATA_DIR, config_get('logs', 'log_file', fallback='bitcointool.log'))
    LOGLEVEL = config_get('logs', 'loglevel', fallback=LOGLEVEL)

    # Other settings
    DEFAULT_NETWORK = config_get('common', 'default_network', fallback=DEFAULT_NETWORK)
    if DEFAULT_NETWORK not in SUPPORTED_NETWORKS:
        raise ValueError("Unsupported default network '%s' in %s" % (DEFAULT_NETWORK, BCT_CONFIG_FILE))
    DERIVATION_FAILURE_POLICY = config_get('common', 'derivation_failure_policy',
                                           fallback=DERIVATION_FAILURE_POLICY)
    if DERIVATION_FAILURE_POLICY not in DERIVATION_FAILURE_POLICIES:
        raise ValueError("Unknown derivation failure policy '%s', use one of %s" %
                         (DERIVATION_FAILURE_POLICY, DERIVATION_FAILURE_POLICIES))
    MAX_TX_HEX_LENGTH = int(config_get('common', 'max_tx_hex_length', fallback=MAX_TX_HEX_LENGTH))
    KEYPATH_MAX_LENGTH = int(config_get('common', 'keypath_max_length', fallback=KEYPATH_MAX_LENGTH))

    if not data:
        return False
    return True

# Initialize tool
read_config()
BITCOINTOOL_VERSION = Path(BCT_INSTALL_DIR, 'config/VERSION').open().read().strip()
