from __future__ import annotations

from datetime import date
from html import escape

_FOOTER = (
    '<p style="color:#999;font-size:13px">Email ini dikirim secara otomatis oleh sistem HRIS<br>'
    "&copy; {year} HRIS Management System. All rights reserved.</p>"
)


def _wrap(body: str) -> str:
    return (
        "<!DOCTYPE html><html><body style=\"font-family:Arial,sans-serif;color:#333\">"
        '<div style="max-width:600px;margin:40px auto;padding:32px">'
        "<h1>HRIS Management</h1>"
        f"{body}"
        f"{_FOOTER.format(year=date.today().year)}"
        "</div></body></html>"
    )


def account_approved(*, username: str, email: str, role: str, login_url: str) -> tuple[str, str]:
    subject = "Akun HRIS Anda Telah Disetujui!"
    body = (
        f"<h2>Selamat, {escape(username)}!</h2>"
        "<p>Akun HRIS Anda telah <strong>disetujui</strong> oleh Administrator. "
        f"Anda sekarang dapat mengakses sistem dengan role sebagai <strong>{escape(role)}</strong>.</p>"
        f"<p>Username: {escape(username)}<br>Email: {escape(email)}<br>Role: {escape(role)}</p>"
        f'<p><a href="{escape(login_url)}">Login Sekarang</a></p>'
    )
    return subject, _wrap(body)


def account_rejected(*, username: str, email: str, reason: str) -> tuple[str, str]:
    subject = "Pendaftaran HRIS Anda Ditolak"
    body = (
        f"<h2>Hai {escape(username)},</h2>"
        f"<p>Mohon maaf, pendaftaran akun HRIS Anda dengan email <strong>{escape(email)}</strong> "
        "telah <strong>ditolak</strong> oleh Administrator.</p>"
        f"<p><strong>Alasan Penolakan:</strong><br>{escape(reason)}</p>"
    )
    return subject, _wrap(body)


def password_reset(*, reset_url: str, token: str, minutes: int) -> tuple[str, str]:
    subject = "Instruksi Reset Password"
    body = (
        "<p>Anda menerima email ini karena Anda (atau seseorang lainnya) telah meminta "
        "untuk mereset password pada akun Anda.</p>"
        f'<p><a href="{escape(reset_url)}">Reset Password Saya</a></p>'
        f"<p>Link ini akan kedaluwarsa dalam {int(minutes)} menit.</p>"
        "<p>Atau, salin token berikut untuk dimasukkan secara manual:</p>"
        f"<pre>{escape(token)}</pre>"
        "<p>Jika Anda tidak meminta reset password ini, abaikan saja email ini.</p>"
    )
    return subject, _wrap(body)
