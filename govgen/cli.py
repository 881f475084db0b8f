"""Command-line entry point for govgen.

Usage::

    govgen generate dao.json
    govgen generate dao.json --save --output-dir ./contracts
    govgen abi --network sepolia --address 0x...
    govgen calldata --address 0x... --function transfer \\
        --types address,uint256 --args '["0x...", "1000"]'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .calldata import encode_calldata
from .config import Settings
from .errors import CalldataEncodingError
from .explorer import ExplorerClient
from .service import GenerationService
from .utils import (
    console,
    load_json,
    print_error,
    print_issues_table,
    print_source,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    config_path = Path(args.config)
    if not config_path.exists():
        print_error(f"Error: Configuration file not found: {config_path}")
        return 1
    try:
        payload = load_json(config_path)
    except ValueError as exc:
        print_error(f"Error: Could not read {config_path}: {exc}")
        return 1

    if args.output_dir:
        settings = settings.model_copy(update={"output_dir": Path(args.output_dir)})

    service = GenerationService(settings)
    response = asyncio.run(service.generate(payload, save_to_file=args.save))

    if not response.success:
        print_error(response.message)
        if response.errors:
            print_issues_table(response.errors)
        elif response.error:
            print_error(response.error)
        return 1

    if args.json:
        console.print_json(data=response.to_wire())
        return 0

    if not args.quiet:
        for contract in response.contracts.values():
            print_source(contract.code, contract.name)

    summary = {role: contract.name for role, contract in response.contracts.items()}
    if response.file_paths is not None:
        summary.update({
            f"{role} file": path
            for role, path in response.file_paths.model_dump().items()
            if path
        })
    print_summary_table(summary, title="Generated contracts")
    print_success(response.message)
    return 0


def _cmd_abi(args: argparse.Namespace, settings: Settings) -> int:
    client = ExplorerClient(settings.networks, timeout=args.timeout)
    result = asyncio.run(client.fetch_abi(args.network, args.address))
    if not result.success:
        print_error(f"Error: {result.error}")
        return 1

    if args.json:
        console.print_json(data=[entry.model_dump(by_alias=True, exclude_none=True) for entry in result.abi])
        return 0

    if not result.functions:
        print_warning(f"{result.name} on {result.network} exposes no functions")
        return 0

    rows = {
        f"{fn.name}({','.join(p.type for p in fn.inputs)})": fn.state_mutability or ""
        for fn in result.functions
    }
    print_summary_table(rows, title=f"{result.name} on {result.network}")
    return 0


def _cmd_calldata(args: argparse.Namespace, settings: Settings) -> int:
    types = [t for t in args.types.split(",") if t.strip()] if args.types else []
    try:
        values = json.loads(args.args) if args.args else []
    except json.JSONDecodeError as exc:
        print_error(f"Error: --args must be a JSON array: {exc}")
        return 1
    if not isinstance(values, list):
        print_error("Error: --args must be a JSON array")
        return 1
    names = args.names.split(",") if args.names else None

    try:
        result = encode_calldata(args.address, args.function, types, values, names)
    except CalldataEncodingError as exc:
        print_error(f"Parameter encoding error: {exc}")
        return 1

    if args.json:
        console.print_json(data=result.model_dump(by_alias=True))
        return 0
    print_summary_table(
        {
            "Signature": result.signature,
            "Calldata": result.calldata,
            "Calldata hash": result.calldata_hash,
            "Contract": result.contract_address,
        },
        title="Call payload",
    )
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govgen",
        description="govgen -- DAO governance contract generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  govgen generate dao.json\n"
            "  govgen generate dao.json --save -o ./contracts\n"
            "  govgen abi --network sepolia --address 0x...\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate governance contracts")
    generate.add_argument("config", help="Path to the JSON governance configuration")
    generate.add_argument(
        "--save",
        action="store_true",
        help="Write the contracts to .sol files",
    )
    generate.add_argument(
        "--output-dir", "-o",
        default=None,
        help="Directory for --save (default: $CONTRACT_OUTPUT_DIR or ./generated-contracts)",
    )
    generate.add_argument("--quiet", "-q", action="store_true", help="Do not print the sources")
    generate.add_argument("--json", action="store_true", help="Print the response as JSON")
    generate.set_defaults(handler=_cmd_generate)

    abi = subparsers.add_parser("abi", help="Fetch a verified contract's ABI")
    abi.add_argument("--network", required=True, help="Network name, e.g. mainnet or sepolia")
    abi.add_argument("--address", required=True, help="Contract address")
    abi.add_argument("--timeout", type=int, default=30, help="Request timeout in seconds")
    abi.add_argument("--json", action="store_true", help="Print the raw ABI as JSON")
    abi.set_defaults(handler=_cmd_abi)

    calldata = subparsers.add_parser("calldata", help="Encode a function call payload")
    calldata.add_argument("--address", required=True, help="Target contract address")
    calldata.add_argument("--function", required=True, help="Function name")
    calldata.add_argument("--types", default="", help="Comma-separated parameter types")
    calldata.add_argument("--args", default="", help="Arguments as a JSON array")
    calldata.add_argument("--names", default="", help="Comma-separated parameter names")
    calldata.add_argument("--json", action="store_true", help="Print the result as JSON")
    calldata.set_defaults(handler=_cmd_calldata)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``govgen`` / ``python -m govgen.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()
    exit_code = args.handler(args, settings)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
