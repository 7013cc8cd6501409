# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    MAIN - Load configs, initialize logging and error definitions
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

# Do not remove any of the imports below, used by other files
import os
import sys
import enum
import logging
from logging.handlers import RotatingFileHandler
from bitcointool.config.config import *


# Initialize logging
logger = logging.getLogger('bitcointool')
logger.setLevel(LOGLEVEL)

if ENABLE_BITCOINTOOL_LOGGING:
    BCT_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(str(BCT_LOG_FILE), maxBytes=10 * 1024 * 1024, backupCount=2)
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(funcName)s(%(lineno)d) %(message)s',
                                  datefmt='%Y/%m/%d %H:%M:%S')
    handler.setFormatter(formatter)
    handler.setLevel(LOGLEVEL)
    logger.addHandler(handler)

    logger.info('WELCOME TO BITCOINTOOL - KEY AND TRANSACTION TOOL')
    logger.info('Version: %s' % BITCOINTOOL_VERSION)
    logger.info('Read config from: %s' % BCT_CONFIG_FILE)
    logger.info('Logging to: %s' % BCT_LOG_FILE)
    logger.info('Directory for data files: %s' % BCT_DATA_DIR)
else:
    logger.addHandler(logging.NullHandler())

_main_logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    """
    Categories of failures reported by the tool commands. Every kind results in exit code 1.
    """
    MISSING_ARGUMENT = 'missing_argument'
    INVALID_ENCODING = 'invalid_encoding'
    INPUT_TOO_LARGE = 'input_too_large'
    INVALID_TRANSACTION = 'invalid_transaction'
    INDEX_OUT_OF_RANGE = 'index_out_of_range'
    INVALID_PUBLIC_KEY = 'invalid_public_key'
    DERIVATION_FAILED = 'derivation_failed'
    SIGNING_FAILED = 'signing_failed'
    OPERATION_FAILED = 'operation_failed'


class ToolError(Exception):
    """
    Tool Exception class, raised by the command operations with an ErrorKind and a message for the user
    """
    def __init__(self, kind, msg=''):
        self.kind = kind
        self.msg = msg
        _main_logger.error("%s: %s" % (kind.value, msg))

    def __str__(self):
        return self.msg
