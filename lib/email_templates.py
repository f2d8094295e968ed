# =============================================================================
# lib/email_templates.py - Transactional Email Templates
# =============================================================================
# Each template takes plain values and returns (subject, html). The shared
# layout wraps content in the branded card; strip_html() derives the
# plain-text part.
#
# All interpolated values are HTML-escaped.
# =============================================================================

from __future__ import annotations

import re
from datetime import datetime
from html import escape, unescape

BRAND_NAME = "Startpoint Academics"
SUPPORT_EMAIL = "support@startpointacademics.com"

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{brand}</title>
  <style>
    body {{ margin: 0; padding: 0; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f4f4f5; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .card {{ background-color: #ffffff; border-radius: 8px; overflow: hidden; }}
    .header {{ background-color: #1e3a5f; color: #ffffff; padding: 24px 32px; text-align: center; }}
    .header h1 {{ margin: 0; font-size: 24px; }}
    .header .tagline {{ color: #d4a853; font-size: 12px; margin-top: 4px; letter-spacing: 1px; }}
    .content {{ padding: 32px; }}
    .footer {{ background-color: #f4f4f5; padding: 24px 32px; text-align: center; color: #71717a; font-size: 12px; }}
    .button {{ display: inline-block; background-color: #d4a853; color: #1e3a5f; text-decoration: none; padding: 12px 24px; border-radius: 6px; font-weight: 600; margin: 16px 0; }}
    .info-box {{ background-color: #f4f4f5; border-left: 4px solid #d4a853; padding: 16px; margin: 16px 0; }}
    .success-box {{ background-color: #dcfce7; border-left: 4px solid #22c55e; padding: 16px; margin: 16px 0; }}
    .warning-box {{ background-color: #fef3c7; border-left: 4px solid #f59e0b; padding: 16px; margin: 16px 0; }}
    .error-box {{ background-color: #fee2e2; border-left: 4px solid #ef4444; padding: 16px; margin: 16px 0; }}
    h2 {{ color: #1e3a5f; margin-top: 0; }}
    p {{ color: #3f3f46; line-height: 1.6; margin: 0 0 16px 0; }}
    .label {{ color: #71717a; font-size: 12px; text-transform: uppercase; margin-bottom: 4px; }}
    .value {{ color: #1e3a5f; font-weight: 600; font-size: 16px; }}
    .mono {{ font-family: 'SF Mono', Monaco, Consolas, monospace; }}
    hr {{ border: none; border-top: 1px solid #e4e4e7; margin: 24px 0; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="card">
      <div class="header">
        <h1>{brand}</h1>
        <div class="tagline">EXCELLENCE IN ACADEMIC ASSISTANCE</div>
      </div>
      <div class="content">
{content}
      </div>
      <div class="footer">
        <p>This email was sent by {brand}.</p>
        <p>If you have questions, please contact us at {support}</p>
      </div>
    </div>
  </div>
</body>
</html>"""


def email_layout(content: str) -> str:
    """Wrap rendered content in the branded layout."""
    return _LAYOUT.format(brand=BRAND_NAME, support=SUPPORT_EMAIL, content=content)


def strip_html(html: str) -> str:
    """Plain-text fallback for an HTML email body."""
    text = re.sub(r"<style[^>]*>.*?</style>", "", html, flags=re.S | re.I)
    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.I)
    text = re.sub(r"</(p|h2|div|li)>", "\n\n", text, flags=re.I)
    text = re.sub(r"<[^>]+>", "", text)
    text = unescape(text).replace("\xa0", " ")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n\s*(\n\s*)+", "\n\n", text)
    return text.strip()


def format_php(amount: float) -> str:
    """Format an amount as Philippine pesos: 1500 -> "₱1,500", 99.5 -> "₱99.50"."""
    if float(amount).is_integer():
        return f"₱{amount:,.0f}"
    return f"₱{amount:,.2f}"


def _info_box(label: str, value: str) -> str:
    return (
        '<div class="info-box">'
        f'<div class="label">{label}</div>'
        f'<div class="value mono">{escape(value)}</div>'
        "</div>"
    )


def _button(url: str, label: str) -> str:
    return f'<p style="text-align: center;"><a href="{escape(url, quote=True)}" class="button">{label}</a></p>'


# =============================================================================
# Templates
# =============================================================================

def project_completion_email(
    client_name: str,
    reference_code: str,
    topic: str | None,
    tracking_url: str,
) -> tuple[str, str]:
    content = f"""
<h2>Your Project is Complete!</h2>
<p>Dear {escape(client_name)},</p>
<p>Great news! Your project has been completed and is ready for download.</p>
<div class="success-box"><strong>Project Completed Successfully!</strong><br />Your files are now available for download.</div>
{_info_box("Reference Code", reference_code)}
<hr />
<h2>Project Details</h2>
<p><strong>Topic:</strong> {escape(topic or "N/A")}</p>
<hr />
<h2>How to Access Your Files</h2>
<p>1. Click the button below to go to the tracking page</p>
<p>2. Enter your PIN (last 4 digits of your phone)</p>
<p>3. Download your completed files from the "Deliverables" section</p>
{_button(tracking_url, "Download Your Files")}
<div class="warning-box"><strong>Please Note:</strong><br />Files will be available for download for 30 days. Please download and save them to your personal storage.</div>
<hr />
<p>Thank you for choosing {BRAND_NAME}! We hope you're satisfied with our service.</p>
"""
    return f"Project Complete: {reference_code} - Download Ready!", email_layout(content)


def payment_validated_email(
    client_name: str,
    reference_code: str,
    amount_validated: float,
    tracking_url: str,
) -> tuple[str, str]:
    content = f"""
<h2>Payment Validated!</h2>
<p>Dear {escape(client_name)},</p>
<p>Great news! Your payment has been validated and your project is now being processed.</p>
<div class="success-box"><div class="label">Payment Confirmed</div><div class="value">{format_php(amount_validated)}</div></div>
{_info_box("Reference Code", reference_code)}
<hr />
<h2>What's Next?</h2>
<p>A writer will be assigned to your project shortly. You'll receive a notification once the assignment is made and work begins.</p>
{_button(tracking_url, "Track Your Project")}
<p>Thank you for choosing {BRAND_NAME}!</p>
"""
    return f"Payment Confirmed: {reference_code} - {BRAND_NAME}", email_layout(content)


def payment_rejected_email(
    client_name: str,
    reference_code: str,
    rejection_reason: str,
    tracking_url: str,
) -> tuple[str, str]:
    content = f"""
<h2>Payment Verification Issue</h2>
<p>Dear {escape(client_name)},</p>
<p>We were unable to verify your payment proof for the following project:</p>
{_info_box("Reference Code", reference_code)}
<div class="error-box"><strong>Reason:</strong><br />{escape(rejection_reason)}</div>
<hr />
<h2>What You Need to Do</h2>
<p>Please submit a new payment proof with the following requirements:</p>
<ul>
  <li>Clear, readable screenshot or photo of the transaction</li>
  <li>Transaction reference number must be visible</li>
  <li>Amount and date must be clearly shown</li>
  <li>Ensure the payment matches the agreed amount</li>
</ul>
{_button(tracking_url, "View Project Details")}
<p>If you have questions or need assistance, please don't hesitate to contact our support team.</p>
"""
    return f"Action Required: Payment Issue - {reference_code}", email_layout(content)


def submission_confirmation_email(
    client_name: str,
    reference_code: str,
    topic: str | None,
    tracking_url: str,
    deadline: datetime | None = None,
    agreed_price: float | None = None,
) -> tuple[str, str]:
    details = [f"<p><strong>Topic:</strong> {escape(topic or 'N/A')}</p>"]
    if deadline is not None:
        details.append(f"<p><strong>Deadline:</strong> {deadline.strftime('%B %d, %Y')}</p>")
    if agreed_price is not None:
        details.append(f"<p><strong>Agreed Price:</strong> {format_php(agreed_price)}</p>")

    content = f"""
<h2>We Received Your Project!</h2>
<p>Dear {escape(client_name)},</p>
<p>Thank you for submitting your project. Our team will validate your payment shortly.</p>
{_info_box("Reference Code", reference_code)}
<hr />
<h2>Project Details</h2>
{"".join(details)}
<hr />
<p>You can follow your project at any time. Use the last 4 digits of your phone number as your PIN.</p>
{_button(tracking_url, "Track Your Project")}
"""
    return f"Project Received: {reference_code} - {BRAND_NAME}", email_layout(content)
