"""CLI: mydocta chat, mydocta send"""

from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from controllers.session_controller import SessionController
from models.chat_models import Message, MessageStatus, Report, Sender, TurnOutcome
from models.errors import InputValidationError
from services.media_encoder import encode_image_file
from services.session.audio_capture import AudioCapture, FileAudioRecorder

console = Console()

REPL_HELP = (
    "[dim]Commands: /image <path>, /audio <path>, /report, /new, /quit[/dim]"
)


def render_message(message: Message) -> None:
    if message.sender is Sender.USER:
        attachments = []
        if message.image_data:
            attachments.append("[image]")
        if message.audio_data:
            attachments.append("[voice note]")
        label = " ".join(attachments + ([message.text] if message.text else []))
        console.print(f"[bold]You:[/bold] {label}")
    elif message.status is MessageStatus.ERROR:
        console.print(f"[red]{message.text}[/red]")
    elif message.status is MessageStatus.AWAITING_RESPONSE:
        console.print(f"[dim]{message.text}[/dim]")
    else:
        console.print(f"[green]MyDocta:[/green] {message.text}")


def render_report(report: Report) -> None:
    console.print(Panel(report.body or "(empty report)", title="Consultation Summary", expand=False))


def render_outcome(outcome: Optional[TurnOutcome]) -> None:
    if outcome is None:
        console.print("[yellow]Nothing sent.[/yellow]")
        return
    for reply in outcome.replies:
        render_message(reply)
    if outcome.report is not None and not outcome.failed:
        console.print("[cyan]A consultation summary is ready. Type /report to show it.[/cyan]")


def record_file(path: str) -> Optional[str]:
    """Run the capture state machine over a pre-recorded clip."""
    capture = AudioCapture(FileAudioRecorder(path))
    if not capture.start():
        console.print(f"[red]{capture.error}[/red]")
        return None
    capture.stop()
    payload = capture.take_payload()
    if payload is None:
        console.print(f"[red]{capture.error or 'Failed to convert audio.'}[/red]")
    return payload


async def _submit_line(controller: SessionController, line: str) -> bool:
    """Handle one REPL line; returns False when the user wants to leave."""
    command, _, argument = line.partition(" ")
    argument = argument.strip()

    if command in ("/quit", "/exit"):
        return False
    if command == "/report":
        if controller.report is None:
            console.print("[dim]No report yet.[/dim]")
        elif controller.toggle_report():
            render_report(controller.report)
        else:
            console.print("[dim]Report hidden.[/dim]")
        return True
    if command == "/new":
        if click.confirm("Start a new session? This will clear the current chat and report."):
            controller.new_session()
            console.print("[cyan]New session started.[/cyan]")
        return True
    if command == "/image":
        try:
            image_data_url = encode_image_file(argument)
        except InputValidationError as exc:
            console.print(f"[red]{exc}[/red]")
            return True
        with console.status("Processing image..."):
            outcome = await controller.submit(image_data_url=image_data_url)
        render_outcome(outcome)
        return True
    if command == "/audio":
        audio_data_url = record_file(argument)
        if audio_data_url is None:
            return True
        with console.status("Processing audio..."):
            outcome = await controller.submit(audio_data_url=audio_data_url)
        render_outcome(outcome)
        return True

    with console.status("Thinking..."):
        outcome = await controller.submit(text=line)
    render_outcome(outcome)
    return True


@click.command("chat")
@click.option("--local", is_flag=True, help="Call the model in-process instead of the chat API.")
@click.pass_obj
def chat_cmd(settings, local: bool):
    """Interactive consultation with MyDocta."""
    from cli.main import build_controller, run

    async def _chat():
        controller, backend = build_controller(settings, local=local)
        for message in controller.messages:
            render_message(message)
        console.print("[cyan]Describe your symptoms (Ctrl+C to exit)[/cyan]")
        console.print(REPL_HELP)
        try:
            while True:
                line = click.prompt("You", prompt_suffix=": ").strip()
                if not line:
                    continue
                if not await _submit_line(controller, line):
                    break
        except (KeyboardInterrupt, EOFError, click.Abort):
            pass
        finally:
            await backend.aclose()

    run(_chat())


@click.command("send")
@click.argument("message", required=False)
@click.option("--image", "image_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--audio", "audio_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--local", is_flag=True, help="Call the model in-process instead of the chat API.")
@click.pass_obj
def send_cmd(settings, message: Optional[str], image_path: Optional[str], audio_path: Optional[str], local: bool):
    """Send a one-shot turn and print the reply."""
    from cli.main import build_controller, run

    image_data_url = None
    audio_data_url = None
    if image_path:
        try:
            image_data_url = encode_image_file(image_path)
        except InputValidationError as exc:
            raise click.ClickException(str(exc))
    if audio_path:
        audio_data_url = record_file(audio_path)
        if audio_data_url is None:
            raise SystemExit(1)

    async def _send():
        controller, backend = build_controller(settings, local=local)
        try:
            outcome = await controller.submit(
                text=message, image_data_url=image_data_url, audio_data_url=audio_data_url
            )
        finally:
            await backend.aclose()
        if outcome is None:
            raise click.UsageError("Provide a message, --image, or --audio.")
        for reply in outcome.replies:
            render_message(reply)
        if outcome.report is not None and not outcome.failed:
            render_report(outcome.report)
        if outcome.failed:
            raise SystemExit(1)

    run(_send())
