"""
sep001/cli/decode.py

sep001 decode: SEP-001 Compact Envelope Decoder CLI
====================================================

Usage:
    sep001 decode <cid>                          Human output (default)
    sep001 decode <cid> --format json            Machine-readable JSON
    sep001 decode <cid> --quiet                  Exit code only
    sep001 decode <cid> --api-url URL            Kubo RPC endpoint
    sep001 decode <cid> --config sep001.yaml     Load settings from YAML
    sep001 decode <cid> --algorithm EdDSA        Restrict accepted algorithms

Exit codes:
    0  Envelope decoded  (signature valid, all claims resolved)
    1  Envelope rejected (signature, payload or claim failure)
    2  Error             (bad CID argument, config, storage unreachable/not found)
"""

import asyncio
import json
import logging
import sys
from typing import Optional, Tuple

import click
import yaml

from sep001.config import DecoderConfig
from sep001.core.cid import parse_cid
from sep001.core.crypto import ALGORITHMS
from sep001.core.exceptions import DecodeError, NotFoundError, StorageError
from sep001.core.models import CLAIM_FIELDS, DecodedEnvelope
from sep001.decoder.compact import CompactDecoder
from sep001.storage.base import BlockStore

EXIT_OK       = 0
EXIT_REJECTED = 1
EXIT_ERROR    = 2

# Operational failures: nothing is known about the envelope's authenticity
_OPERATIONAL_ERRORS = (NotFoundError, StorageError)


# ── ANSI color ────────────────────────────────────────────────────────────────

class _Color:
    """
    Minimal ANSI color wrapper.
    Auto-disables when not a TTY or --no-color is passed.
    """
    _on: bool = True

    @classmethod
    def configure(cls, enabled: bool) -> None:
        cls._on = enabled and sys.stdout.isatty()

    @classmethod
    def green(cls, s: str) -> str:
        return f"\033[32m{s}\033[0m" if cls._on else s

    @classmethod
    def red(cls, s: str) -> str:
        return f"\033[31m{s}\033[0m" if cls._on else s

    @classmethod
    def bold(cls, s: str) -> str:
        return f"\033[1m{s}\033[0m" if cls._on else s

    @classmethod
    def dim(cls, s: str) -> str:
        return f"\033[2m{s}\033[0m" if cls._on else s


def _row_ok(label: str, value: str) -> str:
    return f"  {_Color.dim(f'{label:<12}')}  {_Color.green('OK')}    {value}"


def _row_info(label: str, value: str) -> str:
    return f"  {_Color.dim(f'{label:<12}')}        {value}"


# ── Wiring ────────────────────────────────────────────────────────────────────

def _load_config(
    config_path: Optional[str],
    api_url:     Optional[str],
    timeout:     Optional[float],
    algorithms:  Tuple[str, ...],
) -> DecoderConfig:
    base = DecoderConfig.from_yaml(config_path) if config_path else DecoderConfig()
    return base.merge(**DecoderConfig.env_overrides()).merge(
        api_url=api_url,
        timeout=timeout,
        algorithms=list(algorithms) or None,
    )


def _open_store(config: DecoderConfig) -> BlockStore:
    return config.build_store()


async def _decode(store: BlockStore, config: DecoderConfig, cid) -> DecodedEnvelope:
    async with CompactDecoder(store, algorithms=config.algorithms) as decoder:
        return await decoder.decode(cid)


# ── CLI command ───────────────────────────────────────────────────────────────

@click.command(name="decode")
@click.argument("root_cid")
@click.option("--api-url", default=None, metavar="URL", help="Kubo RPC API base URL.")
@click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML config file (api_url, timeout, algorithms).",
)
@click.option(
    "--algorithm", "algorithms",
    type=click.Choice(sorted(ALGORITHMS)),
    multiple=True,
    help="Accept only this JWS algorithm. Repeatable.",
)
@click.option(
    "--format", "fmt",
    type=click.Choice(["human", "json"], case_sensitive=False),
    default="human",
    show_default=True,
    help="Output format.",
)
@click.option("--quiet", is_flag=True, default=False, help="Exit code only.")
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI color output.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def decode_command(
    root_cid:    str,
    api_url:     Optional[str],
    timeout:     Optional[float],
    config_path: Optional[str],
    algorithms:  Tuple[str, ...],
    fmt:         str,
    quiet:       bool,
    no_color:    bool,
    log_level:   str,
) -> None:
    """
    Decode the SEP-001 Compact envelope stored at ROOT_CID.

    \b
    Examples:
      sep001 decode bafkrei...
      sep001 decode QmRoot... --format json | python -m json.tool
      sep001 decode bafkrei... --algorithm EdDSA --algorithm ES256
    """
    _Color.configure(not no_color)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load_config(config_path, api_url, timeout, algorithms)
    except (OSError, ValueError, yaml.YAMLError) as e:
        _emit_error(f"Invalid configuration: {e}", "ConfigError", fmt, quiet)
        sys.exit(EXIT_ERROR)

    try:
        cid = parse_cid(root_cid)
    except ValueError as e:
        _emit_error(str(e), "InvalidRootCid", fmt, quiet)
        sys.exit(EXIT_ERROR)

    try:
        envelope = asyncio.run(_decode(_open_store(config), config, cid))
    except _OPERATIONAL_ERRORS as e:
        _emit_error(str(e), type(e).__name__, fmt, quiet)
        sys.exit(EXIT_ERROR)
    except DecodeError as e:
        _emit_error(str(e), type(e).__name__, fmt, quiet)
        sys.exit(EXIT_REJECTED)

    if quiet:
        sys.exit(EXIT_OK)

    if fmt == "json":
        click.echo(json.dumps(envelope.to_dict(), indent=2, ensure_ascii=False))
    else:
        _output_human(str(cid), envelope)
    sys.exit(EXIT_OK)


# ── Output ────────────────────────────────────────────────────────────────────

def _output_human(root: str, envelope: DecodedEnvelope) -> None:
    bar = "─" * 60
    header = envelope.header
    jwk = header.get("jwk", {})

    click.echo()
    click.echo(_Color.bold("  sep001  ·  SEP-001 Compact Envelope"))
    click.echo(f"  {bar}")
    click.echo(_row_info("Root", root))
    click.echo(_row_ok("Signature", f"{header.get('alg')} · embedded {jwk.get('kty')} key"))
    for name, value in envelope.payload.to_dict().items():
        rendered = json.dumps(value, ensure_ascii=False, sort_keys=True)
        if len(rendered) > 60:
            rendered = rendered[:57] + "..."
        click.echo(_row_ok(f"Claim {name}", rendered))
    click.echo(f"  {bar}")
    click.echo(_Color.green(_Color.bold(
        f"  VALID  ·  {len(CLAIM_FIELDS)} claims resolved"
    )))
    click.echo()


def _emit_error(msg: str, kind: str, fmt: str, quiet: bool) -> None:
    """Emit error in the correct format. Never raises."""
    if quiet:
        return
    if fmt == "json":
        click.echo(json.dumps({"error": msg, "kind": kind}))
    else:
        click.echo(_Color.red(f"\n  ERROR [{kind}]: {msg}\n"), err=True)
