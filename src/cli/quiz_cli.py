"""
Quizcore CLI - check, score and preview quiz files from the terminal.

Usage:
    quizcore validate quiz.json            # Authoring status of every question
    quizcore validate quiz.json --strict   # Also fail on unfinished questions
    quizcore score quiz.json answers.json  # Score a set of answers
    quizcore preview quiz.json q3 -l sl    # Show one question as a student sees it

Exit codes (validate):
    0 - all questions valid
    1 - structural errors, or the file could not be read
    2 - no errors but some questions unfinished (--strict only)
"""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Local imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
from config import get_settings
from src.quizcore.exceptions import QuizCoreError
from src.quizcore.interaction import OrderingPresenter
from src.quizcore.localization import localized
from src.quizcore.scoring import score_quiz
from src.quizcore.store import load_quiz_file
from src.quizcore.template import MissingFieldSegment, render_rich, render_template
from src.quizcore.types import (
    ImageContent,
    MixedContent,
    Question,
    QuestionType,
    Quiz,
    TextContent,
)
from src.quizcore.validation import ValidationStatus, validate_quiz

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="quizcore",
    help="Quiz authoring checks, scoring and previews",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

STATUS_STYLES = {
    ValidationStatus.COMPLETE: "green",
    ValidationStatus.PARTIAL: "yellow",
    ValidationStatus.INCOMPLETE: "dim",
    ValidationStatus.ERROR: "red",
}


def _load(path: Path) -> Quiz:
    """Load a quiz file or exit with code 1."""
    try:
        return load_quiz_file(path)
    except QuizCoreError as e:
        console.print(f"[red]✗ {escape(str(e))}[/]")
        raise typer.Exit(code=1)


def _content_text(content: Any, language: str) -> str:
    if isinstance(content, TextContent):
        return localized(content, "text", language) or ""
    if isinstance(content, ImageContent):
        alt = localized(content, "alt_text", language) or ""
        return f"🖼 {alt or content.image_url}"
    if isinstance(content, MixedContent):
        parts = [
            localized(content, "text", language) or "",
            f"🖼 {content.image_url}" if content.image_url else "",
            localized(content, "suffix", language) or "",
        ]
        return " ".join(p for p in parts if p)
    return "[dim]<no content>[/]"


# =============================================================================
# Validate
# =============================================================================


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="Quiz JSON file")],
    strict: Annotated[
        bool, typer.Option("--strict", "-s", help="Fail when any question is unfinished")
    ] = False,
) -> None:
    """
    Check every question of a quiz for missing content and structural errors.

    Examples:
        quizcore validate quiz.json
        quizcore validate quiz.json --strict
    """
    quiz = _load(path)
    result = validate_quiz(quiz)

    table = Table(title=f"{quiz.title or quiz.id} ({len(quiz.questions)} questions)")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Done", justify="right")
    table.add_column("Issues")

    for question in quiz.questions:
        q_result = result.questions[question.id]
        issues = [f"[red]{e.field}: {e.message}[/]" for e in q_result.errors]
        issues += [f"[yellow]missing {m}[/]" for m in q_result.missing_fields]
        style = STATUS_STYLES[q_result.status]
        table.add_row(
            question.id,
            question.question_type.value,
            f"[{style}]{q_result.status.value}[/]",
            f"{q_result.completion_percentage}%",
            "\n".join(issues) or "-",
        )

    console.print(table)

    for error in result.errors:
        console.print(f"[red]✗ {error.field}: {error.message}[/]")

    style = STATUS_STYLES[result.status]
    console.print(
        f"\n[{style}]Quiz status: {result.status.value}[/] "
        f"({result.complete_count}/{len(quiz.questions)} questions complete)"
    )

    if result.status == ValidationStatus.ERROR:
        raise typer.Exit(code=1)
    if strict and not result.is_complete:
        raise typer.Exit(code=2)


# =============================================================================
# Score
# =============================================================================


@app.command()
def score(
    quiz_path: Annotated[Path, typer.Argument(help="Quiz JSON file")],
    answers_path: Annotated[Path, typer.Argument(help="Answers JSON: {questionId: answer}")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the submission record here")
    ] = None,
) -> None:
    """
    Score a set of answers against a quiz.

    Examples:
        quizcore score quiz.json answers.json
        quizcore score quiz.json answers.json -o submission.json
    """
    quiz = _load(quiz_path)

    try:
        with open(answers_path, "r", encoding="utf-8") as f:
            answers = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗ Cannot read answers file {answers_path}: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    if isinstance(answers, dict) and isinstance(answers.get("answers"), dict):
        answers = answers["answers"]
    if not isinstance(answers, dict):
        console.print("[red]✗ Answers file must map question ids to answers[/]")
        raise typer.Exit(code=1)

    submission = score_quiz(quiz.questions, answers)

    table = Table(title="Results")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Correct", justify="center")
    table.add_column("Score", justify="right")

    for question, entry in zip(quiz.questions, submission.answers):
        table.add_row(
            question.id,
            question.question_type.value,
            "[green]✓[/]" if entry.is_correct else "[red]✗[/]",
            f"{entry.score:g} / {entry.max_score:g}",
        )
    console.print(table)

    console.print(Panel(
        f"[bold]Score:[/] {submission.total_score:g} / {submission.max_total_score:g} "
        f"({submission.percentage:.1f}%)\n"
        f"[bold]Correct:[/] {submission.correct_questions} / {submission.total_questions}",
        title="Submission",
        border_style="cyan",
    ))

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(submission.to_record(), f, indent=2, ensure_ascii=False)
        console.print(f"[green]✓[/] Submission written to {output}")


# =============================================================================
# Preview
# =============================================================================


def _preview_body(question: Question, language: str, rng: random.Random) -> None:
    qtype = question.question_type
    body = question.body

    if qtype in (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE):
        marker = "○" if qtype == QuestionType.SINGLE_CHOICE else "☐"
        for option in body.options:
            console.print(f"  {marker} {localized(option, 'text', language) or ''}")

    elif qtype == QuestionType.TEXT_INPUT:
        data = body.text_input_data
        placeholder = localized(data, "placeholder", language) if data else None
        input_type = data.input_type.value if data else "text"
        console.print(f"  [dim]\\[{input_type}][/] {placeholder or '________'}")

    elif qtype == QuestionType.DROPDOWN:
        data = body.dropdown_data
        if data is None:
            console.print("[red]No dropdown configuration[/]")
            return
        template = localized(data, "template", language) or ""
        segments = render_template(template, data.dropdowns)
        console.print(render_rich(segments, language))
        for field in data.dropdowns:
            options = ", ".join(localized(o, "text", language) or "" for o in field.options)
            console.print(f"  [cyan]{localized(field, 'label', language) or field.id}[/]: {options}")
        for segment in segments:
            if isinstance(segment, MissingFieldSegment):
                console.print(f"[red]✗ Template references unknown dropdown {segment.token}[/]")

    elif qtype == QuestionType.ORDERING:
        data = body.ordering_data
        if data is None:
            console.print("[red]No ordering configuration[/]")
            return
        console.print(f"[italic]{localized(data, 'instructions', language) or ''}[/]")
        items = {item.id: item for item in data.items}
        for position, item_id in enumerate(OrderingPresenter(data, rng=rng).present(), start=1):
            console.print(f"  {position}. {_content_text(items[item_id].content, language)}")

    elif qtype == QuestionType.MATCHING:
        data = body.matching_data
        if data is None:
            console.print("[red]No matching configuration[/]")
            return
        console.print(f"[italic]{localized(data, 'instructions', language) or ''}[/]")
        table = Table(show_header=True)
        table.add_column("Left", style="cyan")
        table.add_column("Right", style="magenta")
        left = sorted(data.left_items, key=lambda i: i.position or 0)
        right = sorted(data.right_items, key=lambda i: i.position or 0)
        for i in range(max(len(left), len(right))):
            table.add_row(
                _content_text(left[i].content, language) if i < len(left) else "",
                _content_text(right[i].content, language) if i < len(right) else "",
            )
        console.print(table)


@app.command()
def preview(
    quiz_path: Annotated[Path, typer.Argument(help="Quiz JSON file")],
    question_id: Annotated[str, typer.Argument(help="Question to show")],
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Display language (en, sl, hr)")
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Random seed for ordering shuffles")
    ] = None,
) -> None:
    """
    Show one question the way a student would see it.

    Examples:
        quizcore preview quiz.json q1
        quizcore preview quiz.json q4 --language sl --seed 7
    """
    quiz = _load(quiz_path)
    question = quiz.question(question_id)
    if question is None:
        console.print(f"[red]✗ No question {question_id} in {quiz_path}[/]")
        raise typer.Exit(code=1)

    language = language or get_settings().default_language
    console.print(Panel(
        localized(question, "text", language) or "[dim]<no prompt>[/]",
        title=f"{question.id} · {question.question_type.value}",
        border_style="cyan",
    ))
    _preview_body(question, language, random.Random(seed))


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{level: <8}</level> | {name}:{function} - {message}",
    )

    app()


if __name__ == "__main__":
    main()
