import json
from enum import Enum
from typing import Annotated, Optional, TypedDict

import typer
from anystore.cli import ErrorHandler
from anystore.logging import configure_logging
from rich.console import Console

from queue_mincer import __version__
from queue_mincer.exceptions import ImproperlyConfigured
from queue_mincer.queue.manager import QueueManager, get_queue
from queue_mincer.settings import Settings, get_settings

settings = Settings()
cli = typer.Typer(
    no_args_is_help=True,
    pretty_exceptions_enable=settings.debug,
    name="Queue Mincer",
)
console = Console(stderr=True)


class State(TypedDict):
    config_uri: str | None


STATE: State = {"config_uri": None}


class Action(str, Enum):
    replace = "replace"
    front = "front"
    back = "back"


class Queue(ErrorHandler):
    def __enter__(self) -> QueueManager:
        super().__enter__()
        return get_queue(STATE["config_uri"])


def parse_item(data: str) -> dict:
    try:
        item = json.loads(data)
    except json.JSONDecodeError as e:
        raise ImproperlyConfigured(f"Invalid json item: `{data}`") from e
    if not isinstance(item, dict):
        raise ImproperlyConfigured("Item must be a json object")
    return item


@cli.callback(invoke_without_command=True)
def cli_queue_mincer(
    version: Annotated[Optional[bool], typer.Option(..., help="Show version")] = False,
    settings: Annotated[
        Optional[bool], typer.Option(..., help="Show current settings")
    ] = False,
    config: Annotated[
        str | None, typer.Option(..., help="Config file (yaml or json)")
    ] = None,
):
    if version:
        console.print(__version__)
        raise typer.Exit()
    with ErrorHandler():
        settings_ = get_settings(config)
    configure_logging(level=settings_.log_level)
    STATE["config_uri"] = config
    if settings:
        console.print(settings_)
        raise typer.Exit()


@cli.command("get")
def cli_get(
    back: Annotated[bool, typer.Option(help="Get from the back of the queue")] = False,
):
    """
    Remove the next item from the queue and print it as json
    """
    with Queue() as queue:
        item = queue.get_back() if back else queue.get_front()
        if item is None:
            console.print("Queue is empty")
        else:
            typer.echo(json.dumps(item, indent=2))


@cli.command("push")
def cli_push(
    item: Annotated[str, typer.Argument(help="Item as json object")],
    front: Annotated[bool, typer.Option(help="Push to the front of the queue")] = False,
):
    """
    Add an item to the queue
    """
    with Queue() as queue:
        data = parse_item(item)
        if front:
            queue.push_front(data)
        else:
            queue.push_back(data)
        console.print("Item added to queue")


@cli.command("load")
def cli_load(
    template_id: Annotated[str, typer.Argument(help="Template id")],
    action: Annotated[
        Action,
        typer.Option(help="Replace the queue or add the items at the front or back"),
    ] = Action.replace,
):
    """
    Load items from a template into the queue
    """
    with Queue() as queue:
        if action == Action.front:
            queue.add_front_from_template(template_id)
            console.print(f"Items from template `{template_id}` added to front")
        elif action == Action.back:
            queue.add_back_from_template(template_id)
            console.print(f"Items from template `{template_id}` added to back")
        else:
            queue.replace_from_template(template_id)
            console.print(f"Queue replaced with items from template `{template_id}`")


@cli.command("templates")
def cli_templates():
    """
    Show available templates
    """
    with Queue() as queue:
        for template_id in queue.loader.list_templates():
            typer.echo(template_id)
