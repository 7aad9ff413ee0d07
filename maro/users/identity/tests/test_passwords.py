"""Tests for :mod:`maro.users.identity.passwords`."""

from unittest import TestCase
import string

from hypothesis import given, settings
from hypothesis import strategies as st

from ..exceptions import PasswordAuthenticationFailed
from .. import passwords


class TestCheckPassword(TestCase):
    """Hashes verify the password they were made from, and nothing else."""

    @given(st.text(alphabet=string.printable))
    @settings(max_examples=50, deadline=None)
    def test_check_passwords_successful(self, passw):
        encrypted = passwords.hash_password(passw)
        self.assertTrue(passwords.check_password(passw, encrypted),
                        f"should work for password '{passw}'")

    @given(st.text(), st.text())
    @settings(max_examples=50, deadline=None)
    def test_check_passwords_fuzz(self, passw, fuzzpw):
        encrypted = passwords.hash_password(passw)
        if passw == fuzzpw:
            self.assertTrue(passwords.check_password(fuzzpw, encrypted))
        else:
            with self.assertRaises(PasswordAuthenticationFailed):
                passwords.check_password(fuzzpw, encrypted)

    def test_salted(self):
        """The same password hashes differently each time."""
        self.assertNotEqual(passwords.hash_password('Secret123!'),
                            passwords.hash_password('Secret123!'))

    def test_garbage_hash(self):
        """An unreadable hash is a failed check, not a crash."""
        with self.assertRaises(PasswordAuthenticationFailed):
            passwords.check_password('Secret123!', 'not base64!')


class TestValidatePassword(TestCase):
    """Tests for :func:`.passwords.validate_password`."""

    DEFAULTS = {
        'PASSWORD_REQUIRED_LENGTH': 6,
        'PASSWORD_REQUIRE_DIGIT': True,
        'PASSWORD_REQUIRE_LOWERCASE': True,
        'PASSWORD_REQUIRE_UPPERCASE': True,
        'PASSWORD_REQUIRE_NON_ALPHANUMERIC': False
    }

    def test_good_passwords(self):
        """Passwords used by the account workflows pass the default policy."""
        for password in ('Secret123!', 'Pass1234'):
            self.assertEqual(
                passwords.validate_password(password, self.DEFAULTS), []
            )

    def test_too_short(self):
        """The length rule is reported first."""
        errors = passwords.validate_password('Ab1', self.DEFAULTS)
        self.assertEqual(errors[0].code, 'PasswordTooShort')
        self.assertIn('6', errors[0].description)

    def test_empty(self):
        """An empty password only reports its length."""
        errors = passwords.validate_password('', self.DEFAULTS)
        self.assertEqual([e.code for e in errors], ['PasswordTooShort'])

    def test_all_rules_reported_in_order(self):
        """Every violated rule is reported."""
        config = dict(self.DEFAULTS, PASSWORD_REQUIRE_NON_ALPHANUMERIC=True)
        errors = passwords.validate_password('aaaaaaaa', config)
        self.assertEqual(
            [e.code for e in errors],
            ['PasswordRequiresNonAlphanumeric', 'PasswordRequiresDigit',
             'PasswordRequiresUpper']
        )

    def test_rules_can_be_relaxed_from_environment(self):
        """String flags from the environment are understood."""
        config = {
            'PASSWORD_REQUIRED_LENGTH': '4',
            'PASSWORD_REQUIRE_DIGIT': '0',
            'PASSWORD_REQUIRE_LOWERCASE': '1',
            'PASSWORD_REQUIRE_UPPERCASE': '0'
        }
        self.assertEqual(passwords.validate_password('abcd', config), [])
