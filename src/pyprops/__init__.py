# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/09/21 20:01:52
# @Author : Kariko Lin

import logging

from .codec import (
    PropertiesError, MalformedEscape,
    escape_key, escape_value, unescape_key, unescape_value
)
from .model import (
    Properties, PropertyEntry, PropertiesIterator, DuplicateKeyError
)
from .parser import (
    PropertiesParser, PropertiesYamlParser,
    load, loads, dump, dumps
)

__all__ = [
    'Properties', 'PropertyEntry', 'PropertiesIterator',
    'PropertiesParser', 'PropertiesYamlParser',
    'load', 'loads', 'dump', 'dumps',
    'escape_key', 'escape_value', 'unescape_key', 'unescape_value',
    'PropertiesError', 'MalformedEscape', 'DuplicateKeyError'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
