"""
Email message content for verification and password reset.

Builds subject lines, HTML bodies and the reset link shared by the
console and SMTP senders.
"""

from html import escape
from urllib.parse import urlencode

VERIFICATION_SUBJECT = "Verify Your Email Address"
RESET_PASSWORD_SUBJECT = "Reset Your Password"

_ACCENT = "#bf5925"


def build_reset_url(app_base_url: str, token: str) -> str:
    """Link to the storefront's reset page with the token as a query parameter."""
    return f"{app_base_url.rstrip('/')}/reset-password?{urlencode({'token': token})}"


def verification_html(code: str, name: str) -> str:
    return f"""
    <div style="max-width: 600px; margin: 0 auto; padding: 20px; font-family: Arial, sans-serif;">
      <h2 style="color: {_ACCENT};">Welcome!</h2>
      <p>Hi {escape(name)},</p>
      <p>Thank you for signing up! Please verify your email address by entering the code below:</p>
      <div style="background-color: #f5f5f5; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px;">
        <h1 style="color: {_ACCENT}; font-size: 32px; margin: 0; letter-spacing: 4px;">{escape(code)}</h1>
      </div>
      <p>This code will expire in 1 hour.</p>
      <p>If you didn't create an account, please ignore this email.</p>
    </div>
    """


def reset_password_html(reset_url: str, name: str) -> str:
    return f"""
    <div style="max-width: 600px; margin: 0 auto; padding: 20px; font-family: Arial, sans-serif;">
      <h2 style="color: {_ACCENT};">Password Reset Request</h2>
      <p>Hi {escape(name)},</p>
      <p>You requested to reset your password. Click the button below to create a new password:</p>
      <div style="text-align: center; margin: 30px 0;">
        <a href="{escape(reset_url)}" style="background-color: {_ACCENT}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 8px; display: inline-block;">Reset Password</a>
      </div>
      <p>This link will expire in 1 hour.</p>
      <p>If you didn't request this password reset, please ignore this email.</p>
    </div>
    """
