"""
Item Finder - Main entry point.
Finds the closest item of a list file using LLM.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from shared.config import get_settings
from shared.exceptions import ItemFinderError

from .finder import ItemFinder
from .list_loader import load_records


def setup_logging():
    """Configure loguru logging."""
    settings = get_settings()
    logger.remove()
    logger.enable("item_finder")

    if settings.log_format == "json":
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
            level=settings.log_level,
        )


def parse_value(raw: str, as_json: bool):
    """Searched value from the command line, optionally decoded as JSON."""
    if not as_json:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--value") from e


@click.command()
@click.option(
    "--list-file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="JSON or YAML file with the list of items",
)
@click.option("--key", "-k", required=True, help="Item field to match on")
@click.option("--value", "-v", "raw_value", required=True, help="Value to find a match for")
@click.option(
    "--json-value",
    is_flag=True,
    help="Parse the value as JSON (numbers, booleans)",
)
@click.option("--description", "-d", default=None, help="Description of the list items")
@click.option("--instructions", "-i", default=None, help="Additional instructions for the model")
@click.option("--system-message", "-s", default=None, help="Replace the system message")
@click.option("--model", "-m", default=None, help="OpenAI model (default from settings)")
@click.option(
    "--allow-no-result/--always-result",
    default=True,
    help="Score the match and drop it below the threshold",
)
@click.option(
    "--threshold",
    "-t",
    type=int,
    default=80,
    help="Minimum confidence (0-100) to accept a match",
)
def main(
    list_file: Path,
    key: str,
    raw_value: str,
    json_value: bool,
    description: Optional[str],
    instructions: Optional[str],
    system_message: Optional[str],
    model: Optional[str],
    allow_no_result: bool,
    threshold: int,
):
    """Item Finder - Picks the closest list item using LLM."""
    setup_logging()

    value = parse_value(raw_value, json_value)

    try:
        records = load_records(list_file)
        finder = ItemFinder(get_settings(), model=model)
    except ItemFinderError as e:
        logger.error(f"Setup failed: {e}")
        sys.exit(1)

    try:
        finder.set_list(records).set_searched_item(key, value)
        finder.set_allow_no_result(allow_no_result).set_no_result_threshold(threshold)

        if description:
            finder.set_description_of_list(description)
        if instructions:
            finder.set_additional_instructions(instructions)
        if system_message:
            finder.set_system_message(system_message)

        result = finder.find()
    except ItemFinderError as e:
        logger.error(f"Search failed: {e}")
        sys.exit(1)
    finally:
        finder.close()

    if result is None:
        click.echo("No match found")
    else:
        click.echo(json.dumps(result, ensure_ascii=False, indent=2))

    score = finder.get_confidence_score()
    if allow_no_result and score is not None:
        click.echo(f"Confidence: {score}/100 - {finder.get_confidence_reasoning()}")


if __name__ == "__main__":
    main()
