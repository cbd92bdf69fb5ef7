import json
import logging
import sys

import click

from .composer import IssuanceClient, IssuanceRequestComposer
from .config import IssuerConfig
from .outcome import IssuanceOutcome
from .session import IssuerSession


def _echo_outcome(outcome: IssuanceOutcome) -> None:
    payload = outcome.to_serialisable()
    click.echo(payload["message"], err=not payload["success"])
    if payload.get("data") is not None:
        click.echo(json.dumps(payload["data"], indent=2))


def _exit_on_failure(outcome: IssuanceOutcome) -> None:
    if not outcome.success:
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Request ACDC credential issuance from a remote issuance service."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def examples():
    """List the example credentials that can pre-fill a request."""
    session = IssuerSession()
    for example in session.catalog:
        click.echo(f"{example.name}\t{example.schema_said}")


@cli.command("import-schema")
@click.argument("schema_file", type=click.Path(dir_okay=False))
def import_schema_cmd(schema_file: str):
    """Read a JSON Schema and show the credential type and example attributes."""
    session = IssuerSession()
    outcome = session.import_schema_file(schema_file)
    _echo_outcome(outcome)
    if outcome.success:
        click.echo(session.attributes)
    _exit_on_failure(outcome)


@cli.command()
@click.option("--aid", default=None, help="Recipient identifier (defaults to DEFAULT_IDENTIFIER_ID)")
@click.option("--schema", "schema_said", default=None, help="Schema SAID of the credential type")
@click.option("--attributes", default=None, help="Credential attributes as JSON text")
@click.option("--attributes-file", type=click.File("r", encoding="utf-8"), default=None, help="Read attributes JSON from a file")
@click.option("--example", default=None, help="Pre-fill schema and attributes from an example credential")
@click.option("--schema-file", type=click.Path(dir_okay=False), default=None, help="Pre-fill from a JSON Schema file")
@click.option("--server-url", default=None, help="Issuance service base URL (defaults to CREDENTIAL_SERVER_URL)")
def issue(aid, schema_said, attributes, attributes_file, example, schema_file, server_url):
    """Submit a credential issuance request."""
    cfg = IssuerConfig()
    if server_url:
        cfg.server_url = server_url
    session = IssuerSession(
        composer=IssuanceRequestComposer(IssuanceClient(cfg)),
        default_identifier=cfg.default_identifier,
    )

    if example and not session.load_example(example):
        raise click.BadParameter(
            f"unknown example {example!r}; choose from: {', '.join(session.example_names())}",
            param_hint="--example",
        )
    if schema_file:
        imported = session.import_schema_file(schema_file)
        if not imported.success:
            _echo_outcome(imported)
            sys.exit(1)

    if aid is not None:
        session.identifier = aid
    if schema_said is not None:
        session.credential_type = schema_said
    if attributes_file is not None:
        session.attributes = attributes_file.read()
    elif attributes is not None:
        session.attributes = attributes

    outcome = session.submit()
    _echo_outcome(outcome)
    _exit_on_failure(outcome)


def main():
    cli()


if __name__ == "__main__":
    main()
