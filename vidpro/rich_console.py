"""
Rich console output
"""

from typing import Dict, Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import Invocation, MediaSummary

# Global console instances
console = Console()
err_console = Console(stderr=True)

USAGE_OPTIONS = [
    ("--config PATH", "YAML config file (default: ~/.config/vidpro/config.yml)"),
    ("--tools-root PATH", "Directory holding yt-poster/, face-crop/, thumbnail-gen/"),
    ("--work-dir PATH", "Temp work directory (default: system temp dir)"),
    ("--crf N", "x264 quality for re-encoding verbs (default: 23)"),
    ("--preset NAME", "x264 preset for re-encoding verbs (default: fast)"),
    ("--clean-srt-backend {script,builtin}", "Use clean_srt.py or the built-in cleaner"),
    ("--dry-run", "Print the commands instead of running them"),
    ("--debug", "Print each command before running it"),
    ("--no-color", "Disable colored output"),
]

USAGE_EXAMPLES = """\
    # Full shorts workflow
    vidpro cut episode.mp4 00:05:30 00:06:00 /tmp/segment.mp4
    vidpro clean-srt segment.srt segment_clean.srt
    vidpro subs /tmp/segment.mp4 segment_clean.srt /tmp/segment_sub.mp4
    vidpro face-crop /tmp/segment_sub.mp4 short_vertical.mp4
    vidpro thumbnail episode.mp4 segment.srt "L2 R1" "ტექსტი 1" "ტექსტი 2" thumb.jpg

    # Batch processing (cuts.txt holds start,end,name lines)
    vidpro batch-cut episode.mp4 cuts.txt ./clips/"""

USAGE_NOTES = [
    "Global options go before the command: vidpro --dry-run cut ...",
    "Stream copy is instant but not frame-perfect",
    "Use cut-precise for exact timing (slower)",
    "Always clean SRT before burning subtitles",
    "Face crop requires video with visible faces",
    "Thumbnail generation needs FAL_KEY env var",
]


class RichOutput:
    """Console output manager, one per dispatcher"""

    def __init__(self, out: Optional[Console] = None, err: Optional[Console] = None):
        self.console = out if out is not None else console
        self.err_console = err if err is not None else err_console

    @classmethod
    def plain(cls) -> 'RichOutput':
        """Output without colors or styling"""
        return cls(Console(no_color=True, highlight=False), Console(stderr=True, no_color=True, highlight=False))

    def print_header(self, title: str = "📹 VidPro - Video Processing CLI"):
        self.console.print(Panel.fit(
            f"[bold blue]{title}[/bold blue]",
            box=box.DOUBLE,
            border_style="cyan"
        ))

    def print_usage(self, commands: Iterable):
        """Print the full help text for the given command specs"""
        self.print_header()
        self.console.print("\n[bold]USAGE:[/bold]\n    vidpro [options] <command> [args...]\n")
        self.console.print("[bold]COMMANDS:[/bold]")
        for spec in commands:
            self.console.print(f"    [green]{spec.name}[/green] {escape(spec.arg_names)}")
            self.console.print(f"        {escape(spec.description)}")
            for line in spec.details:
                self.console.print(f"        {escape(line)}")
            if spec.example:
                self.console.print(f"        Example: {escape(spec.example)}")
            self.console.print()

        self.console.print("[bold]OPTIONS:[/bold]")
        for flag, text in USAGE_OPTIONS:
            self.console.print(f"    {escape(flag):<38} {text}")

        self.console.print("\n[bold]EXAMPLES:[/bold]")
        self.console.print(escape(USAGE_EXAMPLES), highlight=False)

        self.console.print("\n[bold]NOTES:[/bold]")
        for note in USAGE_NOTES:
            self.console.print(f"    - {note}")

    def print_command_usage(self, usage: str):
        self.err_console.print(f"[red]Usage: {escape(usage)}[/red]")

    def print_step(self, message: str, fields: Optional[Dict[str, object]] = None):
        """Print a step banner with indented key/value details"""
        self.console.print(f"[bold blue]{message}[/bold blue]")
        for key, value in (fields or {}).items():
            self.console.print(f"   {key}: {escape(str(value))}", highlight=False)

    def print_command(self, invocation: Invocation, prefix: str = "$"):
        self.console.print(f"[dim]{prefix}[/dim] {escape(invocation.display())}", highlight=False)

    def print_success(self, message: str = "Done"):
        self.console.print(f"[bold green]✅ {escape(message)}[/bold green]")

    def print_error(self, message: str, details: Optional[str] = None):
        self.err_console.print(f"[bold red]❌ {escape(message)}[/bold red]")
        if details:
            self.err_console.print(f"[red]Details: {escape(details)}[/red]")

    def print_warning(self, message: str):
        self.err_console.print(f"[bold yellow]⚠️  {escape(message)}[/bold yellow]")

    def print_info(self, message: str):
        self.console.print(f"[cyan]{escape(message)}[/cyan]")

    def print_text(self, text: str):
        """Print text verbatim (no markup, no highlighting)"""
        self.console.print(text, markup=False, highlight=False)

    def print_json(self, text: str):
        self.console.print_json(text)

    def print_media_summary(self, summary: MediaSummary):
        """Print a condensed metadata table"""
        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Property", style="cyan", width=20)
        table.add_column("Value", style="white")

        table.add_row("File", escape(summary.file_name))
        if summary.format_name:
            table.add_row("Container", escape(summary.format_name))
        if summary.duration is not None:
            table.add_row("Duration", f"{summary.duration:.2f}s")
        if summary.size_bytes is not None:
            table.add_row("Size", format_file_size(summary.size_bytes))
        if summary.bit_rate is not None:
            table.add_row("Bit Rate", f"{summary.bit_rate // 1000} kb/s")

        for stream in summary.streams:
            parts = [stream.codec_name or "unknown"]
            if stream.resolution:
                parts.append(stream.resolution)
            if stream.frame_rate and stream.frame_rate != "0/0":
                parts.append(f"{stream.frame_rate} fps")
            if stream.channels:
                parts.append(f"{stream.channels} ch")
            if stream.sample_rate:
                parts.append(f"{stream.sample_rate} Hz")
            if stream.language:
                parts.append(stream.language)
            table.add_row(f"#{stream.index} {stream.codec_type.title()}", escape(", ".join(parts)))

        self.console.print(table)


def format_file_size(size_bytes):
    """Convert bytes to human readable format"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


# Global rich output instance
rich_output = RichOutput()
