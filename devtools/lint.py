import subprocess

from funlog import log_calls
from rich import get_console, reconfigure
from rich import print as rprint

LOCATIONS = ["src", "tests", "devtools"]

reconfigure(emoji=not get_console().options.legacy_windows)  # No emojis on legacy windows.


def main():
    """Run Python linting checks and report errors.

    Returns:
        int: The number of errors encountered during linting
    """
    rprint()

    errcount = 0
    errcount += run(["ruff", "check", "--fix", *LOCATIONS])
    errcount += run(["ruff", "format", *LOCATIONS])
    errcount += run(["basedpyright", "src"])
    errcount += run(["codespell", "--write-changes", *LOCATIONS])

    rprint()

    if errcount != 0:
        rprint(f"[bold red]:x: Lint failed with {errcount} errors.[/bold red]")
    else:
        rprint("[bold green]:white_check_mark: Lint passed![/bold green]")
    rprint()

    return errcount


@log_calls(level="warning", show_timing_only=True)
def run(cmd: list[str]) -> int:
    """Execute a command and report whether it failed.

    Args:
        cmd: The command to run as a list of strings

    Returns:
        int: 0 if the command succeeded, 1 if it failed
    """
    rprint()
    rprint(f"[bold green]>> {' '.join(cmd)}[/bold green]")
    try:
        subprocess.run(cmd, text=True, check=True)
    except subprocess.CalledProcessError as e:
        rprint(f"[bold red]Error: {e}[/bold red]")
        return 1
    return 0


if __name__ == "__main__":
    exit(main())
