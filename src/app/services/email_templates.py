from dataclasses import dataclass
from datetime import datetime
from html import escape


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    html: str
    text: str


def build_reset_link(app_url: str, raw_token: str) -> str:
    return f"{app_url.rstrip('/')}/auth/reset-password?token={raw_token}"


def password_reset_email(
    reset_link: str,
    user_email: str,
    app_name: str,
    app_url: str,
    ttl_minutes: int,
) -> EmailTemplate:
    year = datetime.now().year
    forgot_url = f"{app_url.rstrip('/')}/auth/forgot-password"
    name = escape(app_name)
    link = escape(reset_link, quote=True)

    html = (
        "<!DOCTYPE html><html lang='en'><head><meta charset='UTF-8'>"
        f"<title>Password Reset - {name}</title></head>"
        "<body style='font-family:Arial,sans-serif;line-height:1.6;color:#333;"
        "max-width:600px;margin:0 auto;padding:20px'>"
        f"<h1>{name}</h1><h2>Reset Your Password</h2>"
        "<p>Hello,</p>"
        f"<p>We received a request to reset the password for your {name} account "
        f"associated with <strong>{escape(user_email)}</strong>.</p>"
        f"<p><a href='{link}' style='display:inline-block;background:#667eea;color:#fff;"
        "padding:12px 30px;text-decoration:none;border-radius:5px'>Reset Password</a></p>"
        "<p>Or copy and paste this link into your browser:</p>"
        f"<p style='word-break:break-all;background:#f0f0f0;padding:10px'>{link}</p>"
        "<ul>"
        f"<li>This link will expire in {ttl_minutes} minutes for your security</li>"
        "<li>If you didn't request this password reset, please ignore this email</li>"
        "<li>Never share this link with anyone</li>"
        f"<li>{name} will never ask for your password via email</li>"
        "</ul>"
        f"<p>If the link has expired, visit our <a href='{escape(forgot_url, quote=True)}'>"
        "password reset page</a> and request a new one.</p>"
        f"<p style='font-size:12px;color:#666'>&copy; {year} {name}. All rights reserved.</p>"
        "</body></html>"
    )

    text = (
        f"{app_name} - Password Reset Request\n\n"
        "Hello,\n\n"
        f"We received a request to reset the password for your {app_name} account "
        f"associated with {user_email}.\n\n"
        "To reset your password, please visit the following link:\n"
        f"{reset_link}\n\n"
        f"- This link will expire in {ttl_minutes} minutes for your security\n"
        "- If you didn't request this password reset, please ignore this email\n"
        "- Never share this link with anyone\n"
        f"- {app_name} will never ask for your password via email\n\n"
        f"If the link has expired, visit {forgot_url} and request a new one.\n\n"
        f"(c) {year} {app_name}. All rights reserved.\n"
    )

    return EmailTemplate(subject=f"Reset Your {app_name} Password", html=html, text=text)
