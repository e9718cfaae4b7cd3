"""
===============================================================================
TARJETA CRC — account/email_templates.py
===============================================================================

Módulo:
    Emails transaccionales localizados (verificación / reset de password)

Responsabilidades:
    - Mantener el set de textos pre-renderizados por idioma (es / en / tr).
    - Construir el link al frontend con el token.
    - Renderizar (subject, html) escapando los valores interpolados.

Colaboradores:
    - identity.users.Language
    - account/passwords.py, account/email_verification.py (consumidores)

Notas:
    - Un idioma desconocido cae a inglés.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Mapping
from urllib.parse import quote

from ....identity.users import Language

VERIFY_EMAIL_PATH = "/verify-email"
RESET_PASSWORD_PATH = "/reset-password"

_BUTTON_STYLE = (
    "display: inline-block; padding: 10px 20px; background-color: #4CAF50; "
    "color: white; text-decoration: none; border-radius: 5px;"
)

_FALLBACK_LINK = {
    Language.EN: "If the button doesn't work, you can also click on this link:",
    Language.ES: "Si el botón no funciona, también puedes hacer clic en este enlace:",
    Language.TR: "Düğme çalışmıyorsa, bu bağlantıya da tıklayabilirsiniz:",
}


@dataclass(frozen=True)
class MessageSet:
    subject: str
    heading: str
    paragraph: str
    button: str
    expiration: str


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


VERIFICATION_MESSAGES: Mapping[Language, MessageSet] = {
    Language.EN: MessageSet(
        subject="Verify Your Email",
        heading="Email Verification",
        paragraph="Please click the button below to verify your email address:",
        button="Verify Email",
        expiration="This link will expire in 24 hours.",
    ),
    Language.ES: MessageSet(
        subject="Verifica tu Correo Electrónico",
        heading="Verificación de Correo",
        paragraph=(
            "Por favor haz clic en el botón a continuación para verificar "
            "tu correo electrónico:"
        ),
        button="Verificar Correo",
        expiration="Este enlace expirará en 24 horas.",
    ),
    Language.TR: MessageSet(
        subject="E-posta Adresinizi Doğrulayın",
        heading="E-posta Doğrulama",
        paragraph=(
            "E-posta adresinizi doğrulamak için lütfen aşağıdaki düğmeye tıklayın:"
        ),
        button="E-postayı Doğrula",
        expiration="Bu bağlantı 24 saat içinde sona erecektir.",
    ),
}

PASSWORD_RESET_MESSAGES: Mapping[Language, MessageSet] = {
    Language.EN: MessageSet(
        subject="Reset Your Password",
        heading="Password Reset",
        paragraph="Please click the button below to reset your password:",
        button="Reset Password",
        expiration="This link will expire in 1 hour.",
    ),
    Language.ES: MessageSet(
        subject="Restablece tu Contraseña",
        heading="Restablecimiento de Contraseña",
        paragraph=(
            "Por favor haz clic en el botón a continuación para restablecer "
            "tu contraseña:"
        ),
        button="Restablecer Contraseña",
        expiration="Este enlace expirará en 1 hora.",
    ),
    Language.TR: MessageSet(
        subject="Şifrenizi Sıfırlayın",
        heading="Şifre Sıfırlama",
        paragraph="Şifrenizi sıfırlamak için lütfen aşağıdaki düğmeye tıklayın:",
        button="Şifreyi Sıfırla",
        expiration="Bu bağlantı 1 saat içinde sona erecektir.",
    ),
}


def build_link(frontend_url: str, path: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}{path}?token={quote(token, safe='')}"


def _render(
    messages: Mapping[Language, MessageSet], language: Language | str, link: str
) -> RenderedEmail:
    lang = _resolve_language(language)
    texts = messages[lang]
    href = escape(link, quote=True)

    html = (
        "<div>"
        f"<h1>{escape(texts.heading)}</h1>"
        f"<p>{escape(texts.paragraph)}</p>"
        f'<a href="{href}" style="{_BUTTON_STYLE}">{escape(texts.button)}</a>'
        f"<p>{escape(_FALLBACK_LINK[lang])}</p>"
        f'<a href="{href}">{href}</a>'
        f"<p>{escape(texts.expiration)}</p>"
        "</div>"
    )
    return RenderedEmail(subject=texts.subject, html=html)


def _resolve_language(language: Language | str) -> Language:
    try:
        return Language(language)
    except ValueError:
        return Language.EN


def render_verification_email(
    language: Language | str, frontend_url: str, token: str
) -> RenderedEmail:
    return _render(
        VERIFICATION_MESSAGES,
        language,
        build_link(frontend_url, VERIFY_EMAIL_PATH, token),
    )


def render_password_reset_email(
    language: Language | str, frontend_url: str, token: str
) -> RenderedEmail:
    return _render(
        PASSWORD_RESET_MESSAGES,
        language,
        build_link(frontend_url, RESET_PASSWORD_PATH, token),
    )
