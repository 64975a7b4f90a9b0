# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command Line Interface for rocker-compose.
"""
import json
import logging
import os

import click
from dotenv import dotenv_values
from pydantic import ValidationError

from ..CONVERTERS.from_docker import config_from_docker
from ..CONVERTERS.to_docker_api import build_create_request
from ..errors import ConfigMissing, ConfigParseError, RockerComposeError
from ..PARSERS.compose_parser import ComposeParser

logger = logging.getLogger(__name__)


@click.group()
@click.option('--file', '-f', default='compose.yml', help='Compose file path')
@click.option('--env-file', type=click.Path(exists=True, dir_okay=False), help='Extra variables for interpolation')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, file, env_file, verbose):
    """
    rocker-compose - translate container specs to and from Docker API requests.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj['file'] = file

    context = dict(os.environ)
    if env_file:
        context.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    ctx.obj['context'] = context


@cli.command()
@click.argument('names', nargs=-1)
@click.pass_context
def render(ctx, names):
    """Print the Docker create request for each container in the compose file."""
    file = ctx.obj['file']
    if not os.path.exists(file):
        raise click.ClickException(f"{file} not found.")

    try:
        compose = ComposeParser(ctx.obj['context']).parse(file)
    except RockerComposeError as e:
        raise click.ClickException(str(e))

    unknown = [n for n in names if n not in compose.containers]
    if unknown:
        raise click.ClickException(f"Unknown containers: {', '.join(unknown)}")

    requests = {}
    for name, config in compose.containers.items():
        if names and name not in names:
            continue
        requests[str(compose.container_name(name))] = build_create_request(config)

    click.echo(json.dumps(requests, indent=2, sort_keys=True))


@cli.command()
@click.argument('inspect_file', type=click.File('r'))
def inspect(inspect_file):
    """Recover stored configurations from `docker inspect` JSON output."""
    try:
        data = json.load(inspect_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid inspect JSON: {e}")

    if isinstance(data, dict):
        data = [data]

    recovered = 0
    for descriptor in data:
        if not isinstance(descriptor, dict):
            logger.error("Skipping inspect entry that is not an object: %r", descriptor)
            continue
        name = descriptor.get('Name', '<unknown>')
        try:
            config = config_from_docker(descriptor)
        except ConfigMissing:
            logger.info("Skipping %s: not managed by rocker-compose", name)
            continue
        except ConfigParseError as e:
            logger.error("%s", e)
            continue
        except ValidationError as e:
            logger.error("Unreadable inspect data for %s: %s", name, e)
            continue

        recovered += 1
        click.echo(f"# {name.lstrip('/')}")
        click.echo(config.to_yaml())

    if not recovered:
        raise click.ClickException("No rocker-compose configuration found.")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
