import json
import re

from manifest_broker.config import BrokerSettings
from manifest_broker.pages import (
    build_manifest_template,
    render_error_page,
    render_form_page,
)


def test_manifest_template_points_back_at_the_listener() -> None:
    template = build_manifest_template(BrokerSettings(port=4567))

    assert template == {
        "url": "https://better-auth.com",
        "redirect_url": "http://localhost:4567/callback",
        "default_permissions": {"emails": "read"},
        "public": True,
        "request_oauth_on_install": True,
    }


def test_form_page_uses_configured_app_name_and_escapes_values() -> None:
    settings = BrokerSettings(
        app_name='evil"><script>',
        homepage_url="https://example.com/</script>",
    )

    html = render_form_page("a" * 32, settings)

    assert 'value="evil&quot;&gt;&lt;script&gt;"' in html
    assert "https://example.com/</script>" not in html
    script = re.search(r"const template = (.*);", html).group(1)
    assert json.loads(script)["url"] == "https://example.com/</script>"


def test_form_page_defaults_app_name_to_timestamped_better_auth() -> None:
    html = render_form_page("a" * 32, BrokerSettings())

    assert re.search(r'id="app-name"[^>]*value="better-auth-\d+"', html)


def test_error_page_escapes_message() -> None:
    html = render_error_page("<b>bad</b>")

    assert "&lt;b&gt;bad&lt;/b&gt;" in html
    assert "<b>bad</b>" not in html


def test_form_page_links_back_to_the_homepage() -> None:
    html = render_form_page("a" * 32, BrokerSettings(homepage_url="https://example.com"))

    assert 'Built for <a href="https://example.com" target="_blank">BETTER-AUTH</a>' in html
