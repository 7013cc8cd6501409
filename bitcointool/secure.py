# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    SECURE - Zeroable buffers for private key material
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

_logger = logging.getLogger(__name__)


class SecureBuffer(object):
    """
    Mutable buffer for secret material such as private keys and WIF strings. The content is overwritten with zeros
    when the buffer is cleared, which happens automatically when it is used as a context manager. A bytearray is
    used in place and not copied, so clearing the buffer also wipes the data the caller passed in.

    >>> with SecureBuffer(b'secret') as buf:
    ...     bytes(buf)
    b'secret'
    >>> buf.cleared
    True
    """

    def __init__(self, data=b''):
        if isinstance(data, str):
            data = data.encode('utf8')
        self._buffer = data if isinstance(data, bytearray) else bytearray(data)
        self.cleared = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear()

    def __len__(self):
        return len(self._buffer)

    def __bytes__(self):
        return bytes(self._buffer)

    def __repr__(self):
        return "<SecureBuffer(%d bytes%s)>" % (len(self._buffer), ', cleared' if self.cleared else '')

    def __del__(self):
        if getattr(self, "_buffer", None) is not None:
            self.clear()

    @property
    def raw(self):
        """
        Underlying bytearray, changes to it are cleared as well
        """
        return self._buffer

    def text(self):
        return self._buffer.decode('utf8')

    def as_int(self):
        return int.from_bytes(self._buffer, 'big')

    def clear(self):
        """
        Overwrite all bytes with zeros
        """
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self.cleared = True

    def is_zero(self):
        return not any(self._buffer)
