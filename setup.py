# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    PyPi Setup Tool
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

from setuptools import setup, find_packages
from codecs import open
import os

here = os.path.abspath(os.path.dirname(__file__))

with open(os.path.join(here, 'bitcointool', 'config', 'VERSION'), encoding='utf-8') as f:
    version = f.read().strip()

# Get the long description from the relevant file
readmetxt = ''
if os.path.isfile(os.path.join(here, 'README.rst')):
    with open(os.path.join(here, 'README.rst'), encoding='utf-8') as f:
        readmetxt = f.read()

kwargs = {}


install_requires = [
      'fastecdsa>=2.2.1;platform_system!="Windows"',
      'ecdsa>=0.17;platform_system=="Windows"',
      'pycryptodome>=3.14.1',
]

kwargs['install_requires'] = install_requires

setup(
      name='bitcointool',
      version=version,
      description='Bitcoin key derivation, address creation and transaction signing tool',
      long_description=readmetxt,
      classifiers=[
            'Development Status :: 4 - Beta',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: GNU Affero General Public License v3 or later (AGPLv3+)',
            'Natural Language :: English',
            'Operating System :: OS Independent',
            'Operating System :: Microsoft :: Windows',
            'Operating System :: POSIX',
            'Programming Language :: Python :: 3.8',
            'Programming Language :: Python :: 3.9',
            'Programming Language :: Python :: 3.10',
            'Programming Language :: Python :: 3.11',
            'Programming Language :: Python :: 3.12',
            'Topic :: Security :: Cryptography',
            'Environment :: Console',
      ],
      url='http://github.com/1200wd/bitcointool',
      author='1200wd',
      author_email='info@1200wd.com',
      license='GNU3',
      packages=find_packages(exclude=['tests', 'tests.*']),
      package_data={'bitcointool': ['config/VERSION', 'data/*.json', 'data/*.example']},
      entry_points={
          'console_scripts': ['bitcointool=bitcointool.tools.bct:main',
                              'bct=bitcointool.tools.bct:main']
      },
      test_suite='tests',
      include_package_data=True,
      keywords='bitcoin keys bip32 hd-wallet segwit transaction signing',
      zip_safe=False,
      **kwargs
)
