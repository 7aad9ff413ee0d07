"""Tests for :mod:`maro.users.encoding`."""

from unittest import TestCase

from hypothesis import given, settings
from hypothesis import strategies as st

from .. import encoding


class TestEncoding(TestCase):
    """Tokens survive the trip through a URL."""

    @given(st.text())
    @settings(max_examples=100)
    def test_reversible(self, token):
        encoded = encoding.encode(token)
        self.assertRegex(encoded, r'^[A-Za-z0-9_-]*$')
        self.assertEqual(encoding.decode(encoded), token)

    def test_no_padding(self):
        self.assertEqual(encoding.encode('a'), 'YQ')
        self.assertEqual(encoding.decode('YQ'), 'a')

    def test_url_safe(self):
        """Characters that would need escaping in a query string are avoided."""
        self.assertEqual(encoding.encode('\xfb\xff'), 'w7vDvw')
        self.assertEqual(encoding.encode('>>>?'), 'Pj4-Pw')

    def test_malformed(self):
        for bad in ('a', 'YQ==', 'abc+', 'ab/c', 'ab c', '//8'):
            with self.assertRaises(ValueError, msg=bad):
                encoding.decode(bad)

    def test_not_utf8(self):
        with self.assertRaises(ValueError):
            encoding.decode('__8')
