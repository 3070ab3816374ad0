"""Question and result rendering utilities for the web views."""

from __future__ import annotations

from html import escape

from practice_app.core.models import Question
from practice_app.core.prompt_renderer import renderer
from practice_app.core.results import ResultSummary, format_duration


def choice_letter(index: int) -> str:
    return chr(ord("A") + index)


def render_question(question: Question, number: int, total: int, font_size: int = 14) -> str:
    """Render a question prompt with its media and lettered choices.

    Args:
        question: The question to display
        number: 1-based position of the question in the quiz
        total: Number of questions in the quiz
        font_size: Font size in points for the document

    Returns:
        HTML string ready for display in QWebEngineView
    """
    markdown_lines = [f"**Question {number} of {total}**", "", question.prompt.strip() or "(No question text)"]
    if question.is_choice:
        markdown_lines.append("")
        for idx, choice in enumerate(question.choices):
            markdown_lines.append(f"**{choice_letter(idx)}.** {choice or '(empty)'}")
    body = renderer.render_media(question.audio_url, question.image_url)
    body += renderer.render_fragment("\n\n".join(markdown_lines))
    return renderer.wrap_document(body, title=f"Question {number}", font_size=font_size)


def render_result_summary(summary: ResultSummary, show_explanations: bool, font_size: int = 12) -> str:
    """Render the per-question review shown after submission."""
    blocks: list[str] = []
    for row in summary.rows:
        if row.is_correct is None:
            verdict = "<span>Not graded</span>"
        elif row.is_correct:
            verdict = '<span class="correct">Correct</span>'
        else:
            verdict = '<span class="incorrect">Incorrect</span>'
        answer = escape(row.answer) if row.answer else "<em>Unanswered</em>"
        block = [
            f"<h3>Question {row.number} · {verdict}</h3>",
            renderer.render_fragment(row.question.prompt),
            f"<p><strong>Your answer:</strong> {answer}</p>",
        ]
        if show_explanations:
            if row.question.correct_answer:
                block.append(f"<p><strong>Correct answer:</strong> {escape(row.question.correct_answer)}</p>")
            if row.question.explanation:
                block.append(f'<div class="explanation">{renderer.render_fragment(row.question.explanation)}</div>')
        blocks.append("\n".join(block))

    header = (
        f"<h2>{escape(summary.title)}</h2>"
        f"<p>{summary.correct_count}/{summary.total_count} correct · "
        f"{summary.answered_count} answered · time {format_duration(summary.time_spent_seconds)}</p>"
    )
    return renderer.wrap_document(header + "<hr />".join(blocks), title="Results", font_size=font_size)
