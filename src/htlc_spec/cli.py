"""Command-line helpers for building and inspecting swap instructions."""

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import click
import yaml

from .client import derive_escrow_addresses
from .config import U64_MAX
from .crypto.hash_algorithms import commitment, hash_of_secret
from .encoding import unpack
from .errors import SpecError
from .types import instruction_type

logger = logging.getLogger(__name__)


@dataclass
class CliConfig:
    """Runtime configuration for the CLI."""
    program_id: Optional[bytes] = None
    output_format: str = "json"
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "CliConfig":
        """Load configuration from environment variables."""
        config = cls()

        program_id = os.environ.get("HTLC_PROGRAM_ID")
        if program_id:
            config.program_id = bytes.fromhex(program_id)

        config.output_format = os.environ.get("HTLC_OUTPUT_FORMAT", "json").lower()
        config.verbose = os.environ.get("HTLC_VERBOSE", "").lower() in ("true", "1", "yes")

        return config


def _hex_bytes(value: str, name: str, size: int = 32) -> bytes:
    v = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        raw = bytes.fromhex(v)
    except ValueError:
        raise click.BadParameter(f"{name} must be hex")
    if size and len(raw) != size:
        raise click.BadParameter(f"{name} must be {size} bytes")
    return raw


def _jsonable(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (v.hex() if isinstance(v, (bytes, bytearray)) else v) for k, v in obj.items()}


def _emit(config: CliConfig, payload: Dict[str, Any]) -> None:
    if config.output_format == "yaml":
        click.echo(yaml.safe_dump(payload, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(payload, indent=2))


@click.group()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default=None,
    help="Output format (default: $HTLC_OUTPUT_FORMAT or json)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def main(ctx: click.Context, output_format: Optional[str], verbose: bool) -> None:
    """Build and inspect HTLC swap instructions."""

    # Load config from environment, then override with CLI args
    config = CliConfig.from_env()
    if output_format:
        config.output_format = output_format
    if verbose:
        config.verbose = True

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    ctx.obj = config


@main.command()
@click.argument("data_hex")
@click.pass_obj
def decode(config: CliConfig, data_hex: str) -> None:
    """Decode and validate an instruction buffer."""
    data = _hex_bytes(data_hex, "instruction", size=0)
    try:
        ix = unpack(data)
    except SpecError as exc:
        logger.error("decode failed: %s", exc)
        _emit(config, {"ok": False, "error": exc.code.name, "code": int(exc.code)})
        sys.exit(1)
    _emit(
        config,
        {
            "ok": True,
            "instruction": instruction_type(ix).name,
            "fields": _jsonable(asdict(ix)),
        },
    )


@main.command("hash-secret")
@click.argument("secret_hex")
@click.pass_obj
def hash_secret(config: CliConfig, secret_hex: str) -> None:
    """Hash a 32-byte secret into its published secret hash."""
    secret = _hex_bytes(secret_hex, "secret")
    _emit(config, {"secret_hash": hash_of_secret(secret).hex()})


@main.command("commitment")
@click.option("--receiver", required=True, help="Receiver id (hex)")
@click.option("--sender", required=True, help="Sender id (hex)")
@click.option("--secret-hash", required=True, help="Secret hash (hex)")
@click.option("--token-program", default=None, help="Token program id (hex); omit for native")
@click.option(
    "--amount", required=True, type=click.IntRange(0, U64_MAX), help="Amount in base units"
)
@click.pass_obj
def commitment_cmd(
    config: CliConfig,
    receiver: str,
    sender: str,
    secret_hash: str,
    token_program: Optional[str],
    amount: int,
) -> None:
    """Compute the payment commitment stored at funding time."""
    digest = commitment(
        _hex_bytes(receiver, "receiver"),
        _hex_bytes(sender, "sender"),
        _hex_bytes(secret_hash, "secret-hash"),
        _hex_bytes(token_program, "token-program") if token_program else None,
        amount,
    )
    _emit(config, {"commitment": digest.hex()})


@main.command()
@click.option("--program-id", default=None, help="Program id (hex); default $HTLC_PROGRAM_ID")
@click.option("--lock-time", required=True, type=click.IntRange(1, U64_MAX), help="Lock time")
@click.option("--secret-hash", required=True, help="Secret hash (hex)")
@click.pass_obj
def derive(config: CliConfig, program_id: Optional[str], lock_time: int, secret_hash: str) -> None:
    """Derive the vault and vault-data addresses with their bumps."""
    pid = _hex_bytes(program_id, "program-id") if program_id else config.program_id
    if pid is None:
        raise click.UsageError("program id required (--program-id or HTLC_PROGRAM_ID)")
    escrow = derive_escrow_addresses(pid, lock_time, _hex_bytes(secret_hash, "secret-hash"))
    logger.debug("derived escrow addresses for lock_time=%d", lock_time)
    _emit(config, _jsonable(asdict(escrow)))


if __name__ == "__main__":
    main()
