# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/pages.py
"""
HTML bodies served by the callback listener.

The entry page posts a GitHub App manifest to GitHub's "new app" page.
GitHub only accepts the manifest as a JSON string in a form field, so the
page serializes it client-side right before submit, using whatever the user
typed into the name and callback URL inputs.
"""

import json
import time
from html import escape
from typing import Any, Dict

from .config import DEFAULT_APP_NAME_PREFIX, BrokerSettings

_STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      background: #000;
      color: #fff;
      min-height: 100vh;
      display: flex;
      align-items: center;
      justify-content: center;
      padding: 24px;
    }
    .container { width: 100%; max-width: 400px; text-align: left; }
    .centered { text-align: center; }
    h1 { font-size: 24px; font-weight: 500; letter-spacing: -0.5px; margin-bottom: 8px; }
    p, .subtitle { color: #888; font-size: 14px; }
    .header { margin-bottom: 32px; }
    .form-group { margin-bottom: 20px; }
    label { display: block; font-size: 13px; font-weight: 500; margin-bottom: 8px; color: #888; }
    input {
      width: 100%;
      padding: 12px 14px;
      background: #111;
      border: 1px solid #333;
      border-radius: 8px;
      color: #fff;
      font-size: 14px;
    }
    input:focus { outline: none; border-color: #fff; }
    .hint { font-size: 12px; margin-top: 6px; }
    button {
      width: 100%;
      padding: 12px 24px;
      background: #fff;
      color: #000;
      border: none;
      border-radius: 8px;
      font-size: 14px;
      font-weight: 500;
      cursor: pointer;
      margin-top: 8px;
    }
    .divider { height: 1px; background: #222; margin: 24px 0; }
    .footer { text-align: center; font-size: 12px; color: #555; }
    .footer a { color: #888; text-decoration: none; }
    .footer a:hover { color: #fff; }
    .error { color: #f55; }
"""


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n'
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{escape(title)}</title>\n"
        f"  <style>{_STYLE}  </style>\n"
        f"</head>\n<body>\n{body}\n</body>\n</html>"
    )


def default_app_name() -> str:
    return f"{DEFAULT_APP_NAME_PREFIX}-{int(time.time())}"


def build_manifest_template(settings: BrokerSettings) -> Dict[str, Any]:
    """
    The parts of the manifest that do not depend on user input.

    ``name`` and ``callback_urls`` are filled in by the page script.
    """
    return {
        "url": settings.homepage_url,
        "redirect_url": settings.redirect_url,
        "default_permissions": {"emails": "read"},
        "public": True,
        "request_oauth_on_install": True,
    }


def _script_json(value: Any) -> str:
    # json.dumps does not escape "</", which would end the script element
    return json.dumps(value).replace("</", "<\\/")


def render_form_page(state: str, settings: BrokerSettings) -> str:
    app_name = settings.app_name or default_app_name()
    template = build_manifest_template(settings)
    body = f"""  <div class="container">
    <div class="header">
      <h1>Create GitHub App</h1>
      <p class="subtitle">Generate OAuth credentials with zero effort</p>
    </div>

    <form id="manifest-form" method="post" action="{escape(settings.app_create_url)}">
      <div class="form-group">
        <label for="app-name">App Name</label>
        <input type="text" id="app-name" name="app-name" required autocomplete="off" spellcheck="false" value="{escape(app_name)}">
        <p class="hint">Must be unique across GitHub</p>
      </div>

      <div class="form-group">
        <label for="callback-url">Callback URL</label>
        <input type="url" id="callback-url" name="callback-url" required autocomplete="off" spellcheck="false" value="{escape(settings.callback_url)}">
        <p class="hint">Where users are redirected after authentication</p>
      </div>

      <input type="hidden" name="state" value="{escape(state)}">
      <input type="hidden" name="manifest" id="manifest-input">

      <button type="submit">Continue with GitHub</button>
    </form>

    <div class="divider"></div>

    <p class="footer">
      Built for <a href="{escape(settings.homepage_url)}" target="_blank">BETTER-AUTH</a>.
    </p>
  </div>

  <script>
    const form = document.getElementById('manifest-form');
    const template = {_script_json(template)};

    form.addEventListener('submit', () => {{
      const manifest = Object.assign({{
        name: document.getElementById('app-name').value,
        callback_urls: [document.getElementById('callback-url').value]
      }}, template);
      document.getElementById('manifest-input').value = JSON.stringify(manifest);
    }});
  </script>"""
    return _page("Create GitHub App", body)


def render_success_page() -> str:
    body = """  <div class="container centered">
    <h1>GitHub App Created</h1>
    <p>You can close this window and return to your terminal.</p>
  </div>"""
    return _page("Success", body)


def render_error_page(message: str) -> str:
    body = f"""  <div class="container centered">
    <h1 class="error">Authorization Failed</h1>
    <p>Error: {escape(message)}</p>
    <p>Return to your terminal and run the command again.</p>
  </div>"""
    return _page("Error", body)
