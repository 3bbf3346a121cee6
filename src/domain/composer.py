"""
Notification email composition.

compose() is a pure function of a SubmissionRecord: both bodies are
rendered from the same ordered section list, so the markup and plain-text
versions always show the same fields in the same order.
"""

from dataclasses import dataclass
from typing import List, Tuple

from .models import ComposedMessage, SubmissionRecord

BRAND = 'DoroLabs'
FOOTER = 'DoroLabs Website Form • Reply to respond'
TEXT_RULE = '─' * 30

# Short names for the subject line
SUBJECT_SERVICE_NAMES = {
    'seo': 'SEO',
    'ai': 'AI Automation',
    'reminders': 'Reminders',
    'custom': 'Custom Tools',
    'general': 'General',
}

# Descriptive names for the body
BODY_SERVICE_NAMES = {
    'seo': 'SEO & Visibility',
    'ai': 'AI Automation',
    'reminders': 'Appointment Reminders',
    'custom': 'Custom Tools',
    'general': 'General Inquiry',
}

_HTML_ESCAPES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#039;',
})

# Row kinds
PLAIN = 'plain'
STRONG = 'strong'
MAILTO = 'mailto'
TEL = 'tel'
MULTILINE = 'multiline'


@dataclass(frozen=True)
class Row:
    label: str
    value: str
    kind: str = PLAIN


Section = Tuple[str, List[Row]]


def escape_html(value: str) -> str:
    """Escape the five reserved markup characters."""
    return value.translate(_HTML_ESCAPES)


def build_subject(record: SubmissionRecord) -> str:
    """
    Derive the subject line from the routing hints.

    Priority: selected package > selected service > interest/service > none.
    """
    if record.selected_package:
        return f"New {record.selected_package.upper()} Package Lead – {BRAND}"
    if record.selected_service:
        service_name = SUBJECT_SERVICE_NAMES.get(record.selected_service, record.selected_service)
        return f"New Lead ({service_name}) – {BRAND}"
    if record.interest or record.service:
        return f"New Lead – {BRAND} [{record.interest or record.service}]"
    return f"New Lead – {BRAND}"


def build_sections(record: SubmissionRecord) -> List[Section]:
    """
    Group populated fields into ordered sections.

    Sections without any populated row are dropped. The contact section is
    always present because name and email are validated upstream.
    """
    interest_rows = []
    if record.selected_package:
        interest_rows.append(Row('Package', record.selected_package.upper(), STRONG))
    if record.selected_service:
        service_name = BODY_SERVICE_NAMES.get(record.selected_service, record.selected_service)
        interest_rows.append(Row('Service', service_name, STRONG))
    if record.interest:
        interest_rows.append(Row('Interest', record.interest))
    if record.service:
        interest_rows.append(Row('Form Service', record.service))
    if record.budget:
        interest_rows.append(Row('Budget', record.budget, STRONG))

    contact_rows = [
        Row('Name', record.name),
        Row('Email', record.email, MAILTO),
    ]
    if record.phone:
        contact_rows.append(Row('Phone', record.phone, TEL))

    business_rows = []
    if record.company:
        business_rows.append(Row('Company', record.company))
    if record.existing_website:
        business_rows.append(Row('Has Website', record.existing_website))
    if record.message:
        business_rows.append(Row('Message', record.message, MULTILINE))

    sections = [
        ('Package & Service Interest', interest_rows),
        ('Contact Details', contact_rows),
        ('Business Context', business_rows),
    ]
    return [(title, rows) for title, rows in sections if rows]


# ============================================================================
# Markup rendering
# ============================================================================

_LABEL_STYLE = 'padding: 6px 12px; color: #666;'
_VALUE_STYLE = 'padding: 6px 12px;'
_LINK_STYLE = 'color: #283d3d;'


def _render_html_row(row: Row) -> str:
    value = escape_html(row.value)
    label_style = _LABEL_STYLE
    value_style = _VALUE_STYLE

    if row.kind == STRONG:
        value_style += ' font-weight: 600;'
    elif row.kind == MAILTO:
        value = f'<a href="mailto:{value}" style="{_LINK_STYLE}">{value}</a>'
    elif row.kind == TEL:
        value = f'<a href="tel:{value}" style="{_LINK_STYLE}">{value}</a>'
    elif row.kind == MULTILINE:
        label_style += ' vertical-align: top;'
        value = value.replace('\r\n', '\n').replace('\n', '<br>')

    return (
        f'<tr><td style="{label_style}">{escape_html(row.label)}</td>'
        f'<td style="{value_style}">{value}</td></tr>'
    )


def _render_html_section(title: str, rows: List[Row]) -> str:
    rendered_rows = '\n        '.join(_render_html_row(row) for row in rows)
    return f"""
    <div style="margin-bottom: 16px;">
      <div style="background: #283d3d; color: white; padding: 8px 12px; font-size: 13px; font-weight: 600; text-transform: uppercase; letter-spacing: 0.5px;">{escape_html(title)}</div>
      <table style="width: 100%; border-collapse: collapse; background: #fafafa; border: 1px solid #e0e0e0; border-top: none;">
        {rendered_rows}
      </table>
    </div>"""


def render_html(sections: List[Section]) -> str:
    """Render sections as a standalone HTML document with inline styles."""
    body = ''.join(_render_html_section(title, rows) for title, rows in sections)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>New Lead</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.5; color: #333; max-width: 500px; margin: 0 auto; padding: 16px; background: #f5f5f5;">
  <div style="background: white; border-radius: 8px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">{body}

    <div style="padding: 12px; font-size: 11px; color: #999; text-align: center; border-top: 1px solid #eee;">
      {escape_html(FOOTER)}
    </div>
  </div>
</body>
</html>"""


# ============================================================================
# Plain-text rendering
# ============================================================================

def render_text(sections: List[Section]) -> str:
    """Render sections as aligned plain text. Values are not escaped."""
    lines = []
    for title, rows in sections:
        lines.append(title.upper())
        lines.append(TEXT_RULE)
        for row in rows:
            if row.kind == MULTILINE:
                lines.append('')
                lines.append(f"{row.label}:")
                lines.append(row.value)
            else:
                lines.append(f"{row.label + ':':<12} {row.value}")
        lines.append('')

    lines.append(TEXT_RULE)
    lines.append(FOOTER)
    return '\n'.join(lines)


def compose(record: SubmissionRecord) -> ComposedMessage:
    """
    Render the notification email for a validated submission.

    Args:
        record: Validated submission

    Returns:
        ComposedMessage with subject, HTML body and plain-text body
    """
    sections = build_sections(record)
    return ComposedMessage(
        subject=build_subject(record),
        html_body=render_html(sections),
        text_body=render_text(sections),
    )
