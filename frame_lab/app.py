"""FrameLab — local pages with every framing-protection setup for framecheck.

Each route serves the same page with a different anti-framing header
combination, so a full run (headers + live frame probe) can be checked
against a known answer:

    framecheck --url http://127.0.0.1:5000/open -vv
"""

from flask import Flask, render_template_string, make_response

app = Flask(__name__)

# route → (description, headers)
PROFILES = {
    "open": ("No framing protection", {}),
    "xfo-deny": ("X-Frame-Options: DENY", {"X-Frame-Options": "DENY"}),
    "xfo-sameorigin": ("X-Frame-Options: SAMEORIGIN",
                       {"X-Frame-Options": "SAMEORIGIN"}),
    "xfo-allow-from": ("X-Frame-Options: ALLOW-FROM (obsolete, ignored)",
                       {"X-Frame-Options": "ALLOW-FROM https://example.com"}),
    "csp-none": ("CSP frame-ancestors 'none'",
                 {"Content-Security-Policy": "frame-ancestors 'none'"}),
    "csp-wildcard": ("CSP frame-ancestors * (counts as present, protects nothing)",
                     {"Content-Security-Policy": "default-src 'self'; frame-ancestors *"}),
    "both": ("X-Frame-Options + CSP frame-ancestors",
             {"X-Frame-Options": "SAMEORIGIN",
              "Content-Security-Policy": "frame-ancestors 'self'"}),
}


# ── Shared HTML layout ──────────────────────────────────────────

_LAYOUT = """<!DOCTYPE html>
<html><head><title>FrameLab — {{ title }}</title>
<style>
body{font-family:monospace;background:#4d0c26;color:#f3cda2;max-width:900px;margin:0 auto;padding:2rem}
a{color:#ff0}h1{color:#f3cda2}
button{background:#1d4ed8;color:#fff;border:none;padding:0.5rem 1rem;cursor:pointer}
pre{background:#1a1a1a;padding:1rem;border:1px solid #333;overflow-x:auto}
</style></head>
<body>
<h1>FrameLab</h1>
<p><a href="/">← Home</a></p>
<h2>{{ title }}</h2>
{{ content|safe }}
</body></html>
"""


def page(title, content):
    return render_template_string(_LAYOUT, title=title, content=content)


@app.route("/")
def home():
    items = "\n".join(
        f'<li><a href="/{name}">{desc}</a></li>'
        for name, (desc, _) in PROFILES.items()
    )
    return page("Home", f"<p>Framing-protection test pages.</p><ul>{items}</ul>")


@app.route("/<profile>")
def profile(profile):
    if profile not in PROFILES:
        return page("Not found", "<p>Unknown profile.</p>"), 404

    desc, headers = PROFILES[profile]
    lines = "\n".join(f"{k}: {v}" for k, v in headers.items()) or "(none)"
    body = page(desc, f"""
    <p>Sensitive action below. If this page shows inside a foreign frame,
    the button can be overlaid.</p>
    <button onclick="alert('Transfer confirmed')">Confirm transfer</button>
    <h3>Framing headers sent</h3>
    <pre>{lines}</pre>
    """)

    resp = make_response(body)
    for k, v in headers.items():
        resp.headers[k] = v
    return resp


if __name__ == "__main__":
    print("\n  FrameLab starting on http://127.0.0.1:5000\n")
    app.run(host="127.0.0.1", port=5000, debug=True)
