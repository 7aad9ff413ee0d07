"""Tests for :mod:`maro.users.identity.tokens`."""

from unittest import TestCase, mock
import time

import jwt

from .. import tokens
from ..exceptions import InvalidToken, ExpiredToken


class TestSignedTokens(TestCase):
    """Email confirmation and reset tokens are bound to user and purpose."""

    def setUp(self):
        self.secret = 'foosecret'
        self.token = tokens.encode('1234', tokens.EMAIL_CONFIRMATION,
                                   'stamp', self.secret, 3600)

    def test_verify(self):
        """A token verifies for the user, purpose and stamp it was made for."""
        tokens.verify(self.token, '1234', tokens.EMAIL_CONFIRMATION, 'stamp',
                      self.secret)

    def test_wrong_user(self):
        with self.assertRaises(InvalidToken):
            tokens.verify(self.token, '4321', tokens.EMAIL_CONFIRMATION,
                          'stamp', self.secret)

    def test_wrong_purpose(self):
        """An email confirmation token cannot reset a password."""
        with self.assertRaises(InvalidToken):
            tokens.verify(self.token, '1234', tokens.RESET_PASSWORD, 'stamp',
                          self.secret)

    def test_rotated_stamp(self):
        """Changing the security stamp invalidates the token."""
        with self.assertRaises(InvalidToken):
            tokens.verify(self.token, '1234', tokens.EMAIL_CONFIRMATION,
                          'newstamp', self.secret)

    def test_wrong_secret(self):
        with self.assertRaises(InvalidToken):
            tokens.decode(self.token, 'othersecret')

    def test_garbage(self):
        with self.assertRaises(InvalidToken):
            tokens.decode('not a token', self.secret)

    def test_expired(self):
        """Expired tokens raise :class:`.ExpiredToken`."""
        claims = {'sub': '1234', 'purpose': tokens.RESET_PASSWORD,
                  'stamp': 'stamp', 'exp': int(time.time()) - 10}
        token = jwt.encode(claims, self.secret, algorithm='HS256')
        with self.assertRaises(ExpiredToken):
            tokens.decode(token, self.secret)


class TestPhoneCodes(TestCase):
    """Phone codes are six digits, stable within a time step."""

    def setUp(self):
        self.modifier = tokens.phone_modifier(tokens.CHANGE_PHONE_NUMBER,
                                              '+79990000000')

    def test_six_digits(self):
        for at in (0, 1_000_000, 1_700_000_000):
            code = tokens.generate_phone_code('stamp', self.modifier, 180,
                                              at=at)
            self.assertEqual(len(code), tokens.PHONE_CODE_LENGTH)
            self.assertTrue(code.isdigit())

    def test_stable_within_step(self):
        a = tokens.generate_phone_code('stamp', self.modifier, 180, at=1800)
        b = tokens.generate_phone_code('stamp', self.modifier, 180, at=1979)
        self.assertEqual(a, b)

    def test_bound_to_stamp_and_number(self):
        """A different stamp or phone number gives a different code."""
        code = tokens.generate_phone_code('stamp', self.modifier, 180, at=1800)
        other_number = tokens.phone_modifier(tokens.CHANGE_PHONE_NUMBER,
                                             '+79990000001')
        self.assertFalse(tokens.verify_phone_code(
            code, 'stamp', other_number, 180, at=1800
        ))
        self.assertFalse(tokens.verify_phone_code(
            code, 'otherstamp', self.modifier, 180, at=1800
        ))

    def test_verify_within_variance(self):
        """Codes verify for ``variance`` steps either side."""
        code = tokens.generate_phone_code('stamp', self.modifier, 180, at=1800)
        self.assertTrue(tokens.verify_phone_code(
            code, 'stamp', self.modifier, 180, variance=2, at=1800 + 2 * 180
        ))
        self.assertFalse(tokens.verify_phone_code(
            code, 'stamp', self.modifier, 180, variance=2, at=1800 + 3 * 180
        ))

    @mock.patch(f'{tokens.__name__}.time')
    def test_uses_current_time(self, mock_time):
        mock_time.time.return_value = 1800
        self.assertEqual(
            tokens.generate_phone_code('stamp', self.modifier, 180),
            tokens.generate_phone_code('stamp', self.modifier, 180, at=1800)
        )
