"""
Command line interface for the commit_split tool.

This module defines the ``main`` command group used as the entry point
of the ``cmsplit`` and ``commit-split`` console scripts. Running it
without a subcommand checks the Git environment, reads the change set,
asks the configured language model for a grouping, validates and if
necessary repairs that grouping, and commits each group after the user
confirms. The ``set-ai``, ``list-ai`` and ``delete-ai`` subcommands
manage model configurations.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click

from commit_split import __version__
from commit_split.config.loader import (
    ConfigError,
    add_model,
    delete_model,
    get_model,
    get_model_list,
    mask_api_key,
)
from commit_split.grouping.change_classifier import describe_kind
from commit_split.grouping.group_model import CommitGroup, ValidationResult
from commit_split.grouping.repair import repair_groups
from commit_split.grouping.validator import validate_groups
from commit_split.llm.commit_grouper import CommitGrouper, ProposalFormatError
from commit_split.llm.openai_client import LLMError, OpenAIClient
from commit_split.vcs.git_client import GitClient, GitError
from commit_split.vcs.status_parser import UnmergedFileError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_LLM_FAILURE = 7


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"⠋ {self.message}...", nl=False)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time
        if exc_type is None:
            click.echo(f"\r✓ {self.message} (took {elapsed:.1f}s)")
        else:
            click.echo(f"\r✗ {self.message}")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    """Print a warning message."""
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {click.style(message, fg='yellow')}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {click.style(message, fg='red')}", err=True)


def display_groups(groups: List[CommitGroup]) -> None:
    """Show the proposed commits."""
    click.echo(" AI-Generated Commit Messages:")
    click.echo(" --------- --------------------------------------------------")
    for idx, group in enumerate(groups):
        click.echo(click.style("  Summary   ", fg="green") + group.title)
        click.echo(click.style("  Files     ", fg="green") + ", ".join(group.changes))
        if idx < len(groups) - 1:
            click.echo("")
    click.echo(" --------- --------------------------------------------------\n")


def display_validation_warnings(result: ValidationResult) -> None:
    """Explain why a proposal failed validation."""
    print_warning("Validation failed:")
    if result.duplicate_files:
        print_info(f"Duplicate files: {', '.join(sorted(result.duplicate_files))}", indent=1)
    if result.missing_files:
        print_info(f"Missing files: {', '.join(sorted(result.missing_files))}", indent=1)
    if result.invalid_files:
        print_info(f"Invalid files: {', '.join(sorted(result.invalid_files))}", indent=1)
    click.echo("")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def select_model(model_name: Optional[str], yes_mode: bool = False) -> Tuple[str, Dict[str, str]]:
    """Pick the model to use and return its name and settings.

    A single configured model is used directly. With several models the
    user is asked, unless ``model_name`` is given.

    Raises
    ------
    ConfigError
        If no usable model configuration is available.
    """
    if model_name:
        return model_name, get_model(model_name)

    names = list(get_model_list())
    if not names:
        raise ConfigError(
            "No AI model configurations found. Please set up at least one model "
            "with 'cmsplit set-ai'."
        )
    if len(names) == 1:
        selected = names[0]
    elif yes_mode:
        raise ConfigError("Several models are configured; choose one with --model.")
    else:
        selected = click.prompt(
            "   Select an AI model",
            type=click.Choice(names),
            default=names[0],
            show_choices=True,
        )
    return selected, get_model(selected)


def commit_groups(client: GitClient, groups: List[CommitGroup]) -> int:
    """Commit each group in order and return how many commits were made.

    Groups left without files are skipped. A failing commit raises
    GitError; earlier commits are kept.
    """
    committed = 0
    for idx, group in enumerate(groups, 1):
        if not group.changes:
            print_warning(f"Skipping empty group: {group.title}", indent=1)
            continue
        with ProgressIndicator(f"Committing group {idx}/{len(groups)}: {group.title}"):
            client.commit_files(group.title, group.changes)
        committed += 1
    return committed


def run(path: Path, model_name: Optional[str], history: int, yes: bool) -> None:
    """Run the split-and-commit pipeline in the repository containing ``path``."""
    total_steps = 5

    # Step 1: Check Git environment
    print_step(1, total_steps, "Checking Git Environment")
    if not GitClient.is_available():
        print_error("Git is not available. Please ensure Git is installed and configured properly.")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
    repo_root = GitClient.find_repo_root(path)
    if repo_root is None:
        print_error(f"Current directory ({path}) is not a Git repository.")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    print_success(f"Found Git repository at: {repo_root}")
    client = GitClient(repo_root)

    # Step 2: Detect changes
    print_step(2, total_steps, "Analyzing Changes")
    try:
        with ProgressIndicator("Reading status and diffs"):
            changes = client.get_changes()
    except UnmergedFileError as exc:
        print_error(f"Unmerged file: {exc.path}")
        print_warning("Please resolve the conflict before running the program.")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
    except GitError as exc:
        print_error(f"Git error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)

    if not changes:
        print_success("No file changes detected.")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    print_success(f"Found {len(changes)} changed file{'s' if len(changes) != 1 else ''}")
    for change in changes[:5]:
        print_info(f"{describe_kind(change.kind)}: {change.path}", indent=1)
    if len(changes) > 5:
        print_info(f"... and {len(changes) - 5} more", indent=1)
    titles = client.get_recent_commit_titles(history)

    # Step 3: Select model
    print_step(3, total_steps, "Selecting Model")
    try:
        name, settings = select_model(model_name, yes)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    print_info(f"Using model: {click.style(name, fg='green')}")

    # Step 4: Generate commit groups using LLM
    print_step(4, total_steps, "Generating AI Commits")
    llm_client = OpenAIClient(base_url=settings["baseURL"], api_key=settings["apiKey"], model=name)
    try:
        with ProgressIndicator("Generating AI commits (this may take a moment)"):
            groups = CommitGrouper(llm_client).generate_groups(changes, titles)
    except (LLMError, ProposalFormatError) as exc:
        print_error(f"LLM error: {exc}")
        raise click.exceptions.Exit(EXIT_LLM_FAILURE)
    if not groups:
        print_warning("No commits generated by AI.")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    # Step 5: Validate, confirm and commit
    print_step(5, total_steps, "Confirming Commits")
    result = validate_groups(changes, groups)
    display_groups(groups)
    if not result.valid:
        display_validation_warnings(result)

    if yes:
        print_info("Auto-accept mode enabled - committing without confirmation")
    else:
        question = (
            "Do you want to continue with the commit?"
            if result.valid
            else "Validation failed. Do you still want to continue with the commit?"
        )
        if not click.confirm(question, default=True):
            print_warning("Commit has been canceled.")
            raise click.exceptions.Exit(EXIT_SUCCESS)

    if not result.valid:
        repair_groups(groups, result)
        if result.missing_files:
            print_warning(
                f"Not committing files the model left out: {', '.join(sorted(result.missing_files))}"
            )

    try:
        committed = commit_groups(client, groups)
    except GitError as exc:
        print_error(f"Failed to commit changes: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)

    click.echo(f"\n✨ Committed {committed} group{'s' if committed != 1 else ''} successfully!\n")


@click.group(invoke_without_command=True, no_args_is_help=True)
@click.option(
    "-p",
    "--path",
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Path to the project directory.",
)
@click.option("--model", "model_name", help="Name of the configured model to use.")
@click.option(
    "--history",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Number of past commit titles sent as context.",
)
@click.option("--yes", "yes", is_flag=True, help="Commit the generated groups without prompting.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="cmsplit")
@click.pass_context
def main(
    ctx: click.Context,
    path: Path,
    model_name: Optional[str],
    history: int,
    yes: bool,
    verbose: bool,
) -> None:
    """commit-split - split code changes into multiple commits with AI-written titles."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    if ctx.invoked_subcommand is not None:
        return

    try:
        run(path.resolve(), model_name, history, yes)
    except click.exceptions.Exit:
        raise
    except click.exceptions.Abort:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)


@main.command("list-ai")
def list_ai() -> None:
    """List all AI model configurations."""
    try:
        models = get_model_list()
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    if not models:
        print_warning("No model configurations found.")
        return
    click.echo("Model list:")
    for name, settings in models.items():
        click.echo(f"- {name}:")
        click.echo(f"  Base-URL: {settings.get('baseURL', '')}")
        click.echo(f"  API-Key: {mask_api_key(settings.get('apiKey', ''))}")


@main.command("set-ai")
@click.argument("name")
@click.option("-u", "--base_url", "base_url", required=True, help="Base URL of the model service.")
@click.option("-k", "--key", "api_key", required=True, help="API key for the model service.")
def set_ai(name: str, base_url: str, api_key: str) -> None:
    """Set AI model configuration."""
    try:
        add_model(name, base_url, api_key)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    print_success(f"Model '{name}' has been added successfully.")


@main.command("delete-ai")
@click.argument("name")
def delete_ai(name: str) -> None:
    """Delete an AI model configuration."""
    try:
        removed = delete_model(name)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    if removed:
        print_success(f"Model '{name}' has been deleted successfully.")
    else:
        print_warning(f'Model configuration for "{name}" not found.')
