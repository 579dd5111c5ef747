"""Rich terminal rendering of analysis results."""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import AnalysisMode, AnalysisResponse, Answer, AnswerStatus, ImageResult

console = Console()

STATUS_STYLES = {
    AnswerStatus.CONSENSUS: "green",
    AnswerStatus.PARTIAL: "yellow",
    AnswerStatus.DIFFERENT: "red",
    AnswerStatus.ERROR: "bold red",
}


def format_answer(answer: Answer) -> Text:
    """Answer text, or the error message for failed calls."""
    if not answer.success:
        return Text(answer.error_message or "error", style="dim red")
    text = Text(answer.text or "")
    if answer.ambiguous:
        text.append("  (unsplit batch response)", style="dim yellow")
    return text


def format_status(answer: Answer) -> Text:
    """Colour-coded status with the match count."""
    if answer.status is None:
        return Text("-")
    label = answer.status.value
    if answer.match_count is not None:
        label = f"{label} ({answer.match_count})"
    return Text(label, style=STATUS_STYLES[answer.status])


def build_result_table(result: ImageResult) -> Table:
    """One table per image: a row per model."""
    table = Table(title=result.filename, title_justify="left", expand=True)
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Answer", ratio=1)
    table.add_column("Status", no_wrap=True)
    for answer in result.answers:
        table.add_row(answer.model, format_answer(answer), format_status(answer))
    return table


def print_response(response: AnalysisResponse) -> None:
    """Print every image's results followed by a summary line."""
    for result in response.results:
        if result.processing_error:
            console.print(f"[bold]{result.filename}[/bold]: [red]{result.processing_error}[/red]")
            continue
        console.print(build_result_table(result))

    agreed = sum(1 for r in response.results if r.consensus_reached)
    console.print(f"\n[dim]Consensus on {agreed} of {len(response.results)} image(s)[/dim]")
    if response.mode == AnalysisMode.BATCH and response.api_calls_saved is not None:
        console.print(f"[dim]Batch mode saved {response.api_calls_saved} model call(s)[/dim]")
