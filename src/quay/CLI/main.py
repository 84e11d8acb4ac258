"""
Command Line Interface for Quay.
"""
import os
import shlex
import click
from ..CONVERTERS.to_compose_yaml import ComposeYamlConverter
from ..MANAGERS.compose_filter import ComposeFilter
from ..PARSERS.argument_parser import classify_arguments
from ..PARSERS.compose_parser import find_compose_file
from ..RUNNERS.compose_invoker import ComposeInvoker, DEFAULT_COMPOSE_COMMAND
from ..errors import QuayError

EPILOG = """\b
Command options:
  --include SERVICE    Service to include (can be used multiple times)
  --exclude SERVICE    Service to exclude (can be used multiple times)
  --port SERVICE:HOST_PORT:CONTAINER_PORT
                       Redefine published port for a service

Note: --include and --exclude options cannot be used together

\b
Examples:
  quay up -d                             # Run all services
  quay up -d --include web --include db  # Run only web and db services
  quay up -d --exclude web               # Run all services except web
  quay -f custom.yml up --include redis  # Use custom compose file
  quay up -d --port web:8080:80          # Publish web's port 80 on host port 8080
"""


@click.command(
    context_settings={
        'ignore_unknown_options': True,
        'allow_interspersed_args': False,
        'help_option_names': ['-h', '--help'],
    },
    epilog=EPILOG,
)
@click.option('--file', '-f', 'compose_file', default=None,
              help='Path to docker-compose file (default: docker-compose.yml or docker-compose.yaml)')
@click.option('--compose-command', envvar='QUAY_COMPOSE_COMMAND', default=DEFAULT_COMPOSE_COMMAND,
              show_default=True, help='Command used to run compose, e.g. "docker compose"')
@click.option('--dry-run', is_flag=True,
              help='Print the filtered compose file (or the proxied command) instead of running it')
@click.option('--verbose', '-v', is_flag=True, help='Print the compose command line before running it')
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx, compose_file, compose_command, dry_run, verbose, args):
    """
    Quay - run docker-compose COMMAND on a subset of services.

    Everything after COMMAND is passed to docker-compose, except the
    --include, --exclude and --port options below.
    """
    if not args:
        click.echo(ctx.get_help())
        ctx.exit(1)

    command = args[0]
    try:
        arguments = classify_arguments(args[1:])
        arguments.selection()
        compose_path = find_compose_file(compose_file)
        invoker = ComposeInvoker.from_string(compose_command)

        stdin_data = None
        if not arguments.has_directives:
            compose_args = invoker.build_passthrough_args(compose_path, args)
        else:
            result = ComposeFilter().load_and_transform(compose_path, arguments)
            for line in result.warnings():
                click.echo(line, err=True)
            stdin_data = ComposeYamlConverter(result.topology).convert()
            compose_args = invoker.build_filtered_args(
                command,
                arguments.command_options,
                project_directory=os.path.dirname(os.path.abspath(compose_path)),
            )

        command_line = shlex.join(invoker.command_line(compose_args))
        if dry_run:
            click.echo(stdin_data if stdin_data is not None else command_line, nl=stdin_data is None)
            return
        if verbose:
            click.echo(f"Starting command: {command_line}", err=True)

        exit_code = invoker.run(compose_args, stdin_data=stdin_data)
    except QuayError as e:
        raise click.ClickException(str(e)) from e

    # Killed by a signal: report it the way a shell would.
    if exit_code < 0:
        exit_code = 128 - exit_code
    ctx.exit(exit_code)


def main():
    """
    Main entry point for the CLI.
    """
    cli(prog_name='quay')


if __name__ == '__main__':
    main()
