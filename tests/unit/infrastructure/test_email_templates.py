"""
Name: Email Template Tests

Responsibilities:
  - Localized subjects per language (en / es / tr) with English fallback
  - Link building (frontend URL + path + URL-encoded token)
  - HTML escaping of the link
"""

import pytest

from timetracker.application.usecases.account.email_templates import (
    build_link,
    render_password_reset_email,
    render_verification_email,
)
from timetracker.identity.users import Language

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "language,subject",
    [
        (Language.EN, "Verify Your Email"),
        (Language.ES, "Verifica tu Correo Electrónico"),
        (Language.TR, "E-posta Adresinizi Doğrulayın"),
        ("de", "Verify Your Email"),
    ],
)
def test_verification_subjects(language, subject):
    assert render_verification_email(language, "http://app", "t").subject == subject


@pytest.mark.parametrize(
    "language,subject",
    [
        (Language.EN, "Reset Your Password"),
        (Language.ES, "Restablece tu Contraseña"),
        (Language.TR, "Şifrenizi Sıfırlayın"),
    ],
)
def test_reset_subjects(language, subject):
    assert render_password_reset_email(language, "http://app", "t").subject == subject


def test_build_link_encodes_token_and_trims_slash():
    assert build_link("http://app/", "/verify-email", "a+b/c=") == (
        "http://app/verify-email?token=a%2Bb%2Fc%3D"
    )


def test_html_contains_link_twice_and_expiration():
    email = render_verification_email(Language.EN, "http://app", "abc")
    assert email.html.count('href="http://app/verify-email?token=abc"') == 2
    assert "This link will expire in 24 hours." in email.html


def test_reset_html_mentions_one_hour():
    email = render_password_reset_email(Language.EN, "http://app", "abc")
    assert "http://app/reset-password?token=abc" in email.html
    assert "1 hour" in email.html
