# Standalone HTML page for a security report.
from html import escape

from packages.schema.models import SecurityIssue, SecurityReport

_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; }
        .vulnerability { background: #ffe6e6; padding: 10px; margin: 10px 0; border-left: 4px solid #ff4444; }
        .safe { background: #e6ffe6; padding: 10px; margin: 10px 0; border-left: 4px solid #44ff44; }
        .warning { background: #fff3e6; padding: 10px; margin: 10px 0; border-left: 4px solid #ffaa44; }
"""


def _issue_block(issue: SecurityIssue) -> str:
    return (
        f'<div class="{issue.severity}">\n'
        f"    <h4>{escape(issue.title)}</h4>\n"
        f"    <p>{escape(issue.description)}</p>\n"
        f"    <p><strong>Line:</strong> {issue.line}</p>\n"
        f"    <p><strong>Severity:</strong> {issue.severity}</p>\n"
        f"</div>"
    )


def render_report_html(report: SecurityReport, title: str = "LiteCoder AI Security Report") -> str:
    issues = "\n".join(_issue_block(issue) for issue in report.issues)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        "    <title>Security Report</title>\n"
        f"    <style>{_STYLE}    </style>\n"
        "</head>\n"
        "<body>\n"
        f"    <h1>{escape(title)}</h1>\n"
        f"    <h2>Overall Score: {round(report.overall_score * 100)}%</h2>\n"
        "    <h3>Issues Found:</h3>\n"
        f"{issues}\n"
        "</body>\n"
        "</html>\n"
    )
