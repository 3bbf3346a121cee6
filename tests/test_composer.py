"""
Tests for notification email composition.
"""

import re

import pytest

from domain.composer import (
    build_sections,
    build_subject,
    compose,
    escape_html,
)
from domain.models import SubmissionRecord


def make_record(**overrides):
    fields = {'name': 'Ada Lovelace', 'email': 'ada@example.com'}
    fields.update(overrides)
    return SubmissionRecord(**fields)


def html_labels(html_body):
    return re.findall(r'<tr><td style="[^"]*">([^<]*)</td>', html_body)


def text_labels(text_body):
    labels = re.findall(r'^([A-Za-z ]+):', text_body, re.MULTILINE)
    return labels


class TestEscapeHtml:
    """Test the single markup escaping helper."""

    def test_escapes_reserved_characters(self):
        assert escape_html('&<>"\'') == '&amp;&lt;&gt;&quot;&#039;'

    def test_ampersand_escaped_once(self):
        assert escape_html('&lt;') == '&amp;lt;'

    def test_plain_text_untouched(self):
        assert escape_html('Ada Lovelace') == 'Ada Lovelace'


class TestBuildSubject:
    """Test subject precedence."""

    def test_package_wins_over_service(self):
        record = make_record(selected_package='pro', selected_service='seo')
        assert build_subject(record) == 'New PRO Package Lead – DoroLabs'

    def test_selected_service_mapped(self):
        record = make_record(selected_service='seo')
        assert build_subject(record) == 'New Lead (SEO) – DoroLabs'

    @pytest.mark.parametrize("code,display", [
        ('ai', 'AI Automation'),
        ('reminders', 'Reminders'),
        ('custom', 'Custom Tools'),
        ('general', 'General'),
    ])
    def test_service_table(self, code, display):
        assert build_subject(make_record(selected_service=code)) == f'New Lead ({display}) – DoroLabs'

    def test_unknown_service_passes_through(self):
        record = make_record(selected_service='web-design')
        assert build_subject(record) == 'New Lead (web-design) – DoroLabs'

    def test_interest_fallback(self):
        record = make_record(interest='automation')
        assert build_subject(record) == 'New Lead – DoroLabs [automation]'

    def test_form_service_fallback(self):
        record = make_record(service='seo-audit')
        assert build_subject(record) == 'New Lead – DoroLabs [seo-audit]'

    def test_interest_preferred_over_form_service(self):
        record = make_record(interest='automation', service='seo-audit')
        assert build_subject(record) == 'New Lead – DoroLabs [automation]'

    def test_no_hints(self):
        assert build_subject(make_record()) == 'New Lead – DoroLabs'


class TestBuildSections:
    """Test section grouping."""

    def test_minimal_record_has_only_contact_section(self):
        sections = build_sections(make_record())

        assert [title for title, _ in sections] == ['Contact Details']
        assert [row.label for row in sections[0][1]] == ['Name', 'Email']

    def test_full_record_section_order(self):
        record = make_record(
            selected_package='starter', selected_service='reminders', interest='x',
            service='y', budget='500', phone='123', company='ACME',
            existing_website='no', message='hi'
        )
        sections = build_sections(record)

        assert [title for title, _ in sections] == [
            'Package & Service Interest', 'Contact Details', 'Business Context'
        ]
        assert [row.label for row in sections[0][1]] == [
            'Package', 'Service', 'Interest', 'Form Service', 'Budget'
        ]
        assert [row.label for row in sections[1][1]] == ['Name', 'Email', 'Phone']
        assert [row.label for row in sections[2][1]] == ['Company', 'Has Website', 'Message']

    def test_body_service_uses_descriptive_names(self):
        sections = build_sections(make_record(selected_service='reminders'))
        service_row = sections[0][1][0]

        assert service_row.value == 'Appointment Reminders'

    def test_package_uppercased(self):
        sections = build_sections(make_record(selected_package='growth'))
        assert sections[0][1][0].value == 'GROWTH'


class TestCompose:
    """Test full composition."""

    def test_compose_is_deterministic(self):
        record = make_record(selected_package='pro', message='a\nb', phone='1')

        assert compose(record) == compose(record)

    def test_script_name_is_escaped_in_html_only(self):
        record = make_record(name='<script>alert(1)</script>')
        message = compose(record)

        assert '<script>' not in message.html_body
        assert '&lt;script&gt;alert(1)&lt;/script&gt;' in message.html_body
        assert '<script>alert(1)</script>' in message.text_body

    def test_email_and_phone_are_links_in_html(self):
        message = compose(make_record(phone='+49 170'))

        assert 'href="mailto:ada@example.com"' in message.html_body
        assert 'href="tel:+49 170"' in message.html_body

    def test_attribute_injection_escaped(self):
        message = compose(make_record(email='a"onmouseover="x@example.com'))

        assert 'mailto:a&quot;onmouseover=&quot;x@example.com' in message.html_body

    def test_message_line_breaks(self):
        message = compose(make_record(message='line 1\r\nline 2\nline 3'))

        assert 'line 1<br>line 2<br>line 3' in message.html_body
        assert 'line 1\r\nline 2\nline 3' in message.text_body

    def test_empty_sections_omitted_in_both_bodies(self):
        message = compose(make_record())

        assert 'Package &amp; Service Interest' not in message.html_body
        assert 'Business Context' not in message.html_body
        assert 'PACKAGE & SERVICE INTEREST' not in message.text_body
        assert 'BUSINESS CONTEXT' not in message.text_body
        assert 'CONTACT DETAILS' in message.text_body

    def test_text_layout(self):
        message = compose(make_record(company='ACME'))
        lines = message.text_body.split('\n')

        assert lines[0] == 'CONTACT DETAILS'
        assert lines[1] == '─' * 30
        assert lines[2] == 'Name:        Ada Lovelace'
        assert lines[3] == 'Email:       ada@example.com'
        assert 'Company:     ACME' in lines
        assert lines[-1] == 'DoroLabs Website Form • Reply to respond'

    def test_html_is_a_document(self):
        html_body = compose(make_record()).html_body

        assert html_body.startswith('<!DOCTYPE html>')
        assert html_body.endswith('</html>')
        assert 'DoroLabs Website Form • Reply to respond' in html_body

    @pytest.mark.parametrize("overrides", [
        {},
        {'phone': '123'},
        {'selected_package': 'pro', 'budget': '1000'},
        {'selected_service': 'custom', 'interest': 'tools', 'service': 'x'},
        {'company': 'ACME', 'existing_website': 'yes', 'message': 'hello\nthere'},
        {'selected_package': 'pro', 'selected_service': 'ai', 'interest': 'a', 'service': 'b',
         'budget': 'c', 'phone': 'd', 'company': 'e', 'existing_website': 'f', 'message': 'g'},
    ])
    def test_bodies_show_same_fields_in_same_order(self, overrides):
        message = compose(make_record(**overrides))

        assert html_labels(message.html_body) == text_labels(message.text_body)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
