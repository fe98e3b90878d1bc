"""Interactive CLI application."""
import os
import sys
import time

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from permit_prep.attempts import AttemptStore
from permit_prep.corpus import load_corpus
from permit_prep.dashboard import get_readiness_color, to_percentage
from permit_prep.db import init_db, DEFAULT_DB_PATH
from permit_prep.engine import PracticeEngine
from permit_prep.models import Question

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a quiz before it ends."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str] | None = None) -> int:
    answer = session_prompt(prompt, choices=(choices + list(EXIT_WORDS)) if choices else None)
    return int(answer)


def configure_logging() -> None:
    logger.remove()
    logger.enable("permit_prep")
    logger.add(
        sys.stderr,
        level=os.environ.get("PERMIT_PREP_LOG_LEVEL", "WARNING"),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def show_welcome():
    console.print(Panel(
        "[bold]Driver's Permit Written Test[/bold]\n[dim]Adaptive Practice[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("quiz", "Adaptive practice quiz"),
        ("review", "Drill weak areas"),
        ("diagnostic", "Diagnostic test (random, unweighted)"),
        ("dashboard", "Readiness score + progress"),
        ("categories", "Performance by category"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_question(number: int, q: Question) -> tuple[str, float]:
    """Show one question and return the chosen label and seconds taken."""
    console.print(f"[bold]Q{number}.[/bold] {q.text} [dim]({q.category})[/dim]\n")
    for label, text in q.choices.items():
        console.print(f"  [cyan]{label.lower()})[/cyan] {text}")
    started = time.monotonic()
    choices = [label.lower() for label in q.choices]
    answer = session_prompt("\nYour answer", choices=choices + list(EXIT_WORDS))
    return answer, time.monotonic() - started


def show_feedback(q: Question, is_correct: bool):
    if is_correct:
        console.print("[green]Correct![/green]")
    else:
        console.print(f"[red]Incorrect.[/red] Answer: [green]{q.correct_answer.lower()}[/green]")
    if q.explanation:
        console.print(f"[dim]{q.explanation}[/dim]")
    console.print()


def run_quiz_session(engine: PracticeEngine, questions: list[Question]) -> tuple[int, int]:
    """Ask each question, record the answers and return (correct, answered)."""
    if not questions:
        console.print("[yellow]No questions available![/yellow]")
        return 0, 0
    correct = 0
    answered = 0
    console.print(f"\n[bold]Quiz[/bold] - {len(questions)} questions [dim](q to stop)[/dim]\n")
    try:
        for i, q in enumerate(questions, 1):
            answer, latency = ask_question(i, q)
            is_correct = engine.answer(q, answer, latency=latency)
            answered += 1
            correct += is_correct
            show_feedback(q, is_correct)
    finally:
        if answered:
            console.print(f"[bold]Score: {correct}/{answered} ({correct/answered*100:.0f}%)[/bold]\n")
    return correct, answered


def choose_category(engine: PracticeEngine) -> str:
    categories = engine.corpus.categories()
    for i, name in enumerate(categories, 1):
        console.print(f"  [cyan]{i}[/cyan]) {name}")
    index = session_int_prompt("Select category", choices=[str(i) for i in range(1, len(categories) + 1)])
    return categories[index - 1]


def cmd_quiz(engine: PracticeEngine):
    console.print("\n[bold]Practice Quiz[/bold]")
    mode = Prompt.ask("Quiz mode", choices=["all", "category"], default="all")
    count = IntPrompt.ask("Number of questions", default=10)
    category = choose_category(engine) if mode == "category" else None
    questions = engine.select_adaptive(count, category)
    run_quiz_session(engine, questions)


def show_category_table(engine: PracticeEngine, title: str = "Category Breakdown"):
    performance = engine.category_performance()
    table = Table(title=title)
    table.add_column("Category", style="cyan")
    table.add_column("Accuracy", justify="right")
    table.add_column("Questions", justify="right")
    table.add_column("Attempts", justify="right")
    for name in engine.corpus.categories():
        perf = performance.get(name)
        if perf is None:
            table.add_row(name, "[dim]-[/dim]", "0", "0")
            continue
        pct = to_percentage(perf.accuracy)
        color = get_readiness_color(pct)
        table.add_row(name, f"[{color}]{pct}%[/{color}]", str(perf.questions_answered), str(perf.total_attempts))
    console.print(table)


def cmd_categories(engine: PracticeEngine):
    show_category_table(engine)


def cmd_dashboard(engine: PracticeEngine):
    score = engine.compute_readiness()
    color = score.status.color
    console.print(Panel(
        f"[bold]{score.questions_seen}[/bold] of {score.total_questions} questions seen",
        title="Readiness Dashboard", border_style="blue",
    ))

    bar_filled = score.percentage // 5
    bar_empty = 20 - bar_filled
    bar = f"[{color}]{'█' * bar_filled}{'░' * bar_empty}[/{color}]"
    console.print(f"\n  Readiness: [bold]{score.percentage}%[/bold] {bar} [{color}]{score.status.title}[/{color}]\n")

    show_category_table(engine)

    if score.weakest_category:
        console.print(f"\n  Weakest: [yellow]{score.weakest_category}[/yellow] ({to_percentage(score.weakest_accuracy)}%)")
    console.print("\n[bold]Recommendations:[/bold]")
    for rec in score.recommendations:
        console.print(f"  - {rec}")


def cmd_review(engine: PracticeEngine):
    console.print("\n[bold]Weak Area Review[/bold]\n")
    weak = engine.weak_categories()
    if weak:
        table = Table(title="Weak Categories")
        table.add_column("Category")
        table.add_column("Accuracy", justify="right")
        for name, accuracy in weak:
            table.add_row(name, f"[red]{to_percentage(accuracy)}%[/red]")
        console.print(table)
    else:
        console.print("[green]No weak areas detected yet.[/green] [dim]Mixing in questions you need most.[/dim]")
    count = IntPrompt.ask("Number of questions", default=10)
    run_quiz_session(engine, engine.select_weak_area(count))


def cmd_diagnostic(engine: PracticeEngine):
    """Unweighted diagnostic quiz; only the overall score is kept."""
    questions = engine.diagnostic_questions()
    if not questions:
        console.print("[yellow]No questions available![/yellow]")
        return
    console.print(f"\n[bold]Diagnostic Test[/bold] - {len(questions)} questions [dim](q to abandon)[/dim]\n")
    answers = []
    started = time.monotonic()
    for i, q in enumerate(questions, 1):
        answer, _ = ask_question(i, q)
        is_correct = q.is_correct(answer)
        answers.append((q, is_correct))
        show_feedback(q, is_correct)
    result = engine.record_diagnostic(answers, time_taken=time.monotonic() - started)

    table = Table(title="Diagnostic Results")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    for name, stats in sorted(result.categories.items(), key=lambda item: item[1].accuracy):
        color = "red" if stats.is_weak else "green"
        table.add_row(name, f"[{color}]{stats.correct}/{stats.total}[/{color}]")
    console.print(table)
    verdict = "[green]Passed[/green]" if result.passed else f"[yellow]{result.pass_threshold} needed to pass[/yellow]"
    console.print(f"\n  Score: [bold]{result.score}/{result.total_questions}[/bold] ({result.percentage}%) {verdict}")


def build_engine(db_path: str = DEFAULT_DB_PATH) -> PracticeEngine:
    init_db(db_path)
    return PracticeEngine(AttemptStore(db_path), load_corpus())


def main():
    configure_logging()
    engine = build_engine()
    show_welcome()

    commands = {
        "quiz": cmd_quiz,
        "review": cmd_review,
        "diagnostic": cmd_diagnostic,
        "dashboard": cmd_dashboard,
        "categories": cmd_categories,
    }
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="quiz").strip().lower()
        try:
            if choice in commands:
                commands[choice](engine)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your test![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command {} failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
