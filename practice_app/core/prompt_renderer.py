"""Markdown rendering for question prompts and explanations.

Architecture note:
    Prompts arrive from the backend as Markdown. They are rendered with
    raw HTML disabled so backend content can never inject markup; the only
    HTML we emit ourselves is the audio/image media block, built from URLs
    that are escaped before use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt


@dataclass(slots=True)
class PromptRenderer:
    """Converts Markdown prompts into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_media(self, audio_url: str | None = None, image_url: str | None = None) -> str:
        parts: list[str] = []
        if image_url:
            parts.append(f'<img class="question-image" src="{escape(image_url, quote=True)}" alt="" />')
        if audio_url:
            parts.append(
                f'<audio controls preload="auto" src="{escape(audio_url, quote=True)}">'
                "Audio playback is not supported.</audio>"
            )
        return "\n".join(parts)

    def wrap_document(self, body_html: str, title: str = "PracticeQt", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document."""
        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; font-size: {font_size}pt; }}
      .question-html {{ line-height: 1.5; }}
      .question-image {{ max-width: 100%; margin-bottom: 0.75rem; }}
      audio {{ width: 100%; margin-bottom: 0.75rem; }}
      .explanation {{ border-left: 3px solid #0078D4; padding-left: 0.75rem; color: #444; }}
      .correct {{ color: #107C10; }}
      .incorrect {{ color: #D13438; }}
    </style>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""


# Shared instance; MarkdownIt is safe to reuse for read-only renders.
renderer = PromptRenderer()
