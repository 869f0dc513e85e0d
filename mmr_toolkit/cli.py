#!/usr/bin/env python3
"""
Unified CLI for the MMR Toolkit.

State lives in a JSON file (--state-file, MMR_STATE_FILE, default
mmr_state.json) that is loaded before and saved after every command.

Examples:
  - Setup
    mmr-toolkit init --verifier-address 0x... --min-update-interval 1024

  - Reference blockhash
    mmr-toolkit store-blockhash --block-number 21000000 --blockhash 0x...
    mmr-toolkit relay-blockhash --chain-id 1 --block finalized

  - Proofs
    mmr-toolkit submit-proof --proof-file proof.json --ipfs-hash Qm...

  - Queries
    mmr-toolkit mmr-state --batch-index 20507
    mmr-toolkit latest-block
    mmr-toolkit batch-bounds --block-number 21000000
"""

import argparse
from typing import Any, Dict, List, Optional, Sequence, Tuple

from mmr_toolkit.accumulator.batches import (
    batch_index_for_block,
    calculate_batch_bounds,
    is_batch_complete,
    verify_mmr_roots,
)
from mmr_toolkit.l1.blockhash import relay_latest_blockhash
from mmr_toolkit.shared.constants import GlobalConstants
from mmr_toolkit.shared.exceptions import ConfigurationException, InvalidInput
from mmr_toolkit.shared.logging import set_log_level
from mmr_toolkit.shared.services.web3_service import Web3Service
from mmr_toolkit.store.events import EVENT_TYPES, event_to_dict
from mmr_toolkit.store.persistence import load_store, save_store
from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.utils.formatters import (
    build_table,
    console,
    format_hash,
    format_short_hash,
    load_json_file,
    save_json_output,
)
from mmr_toolkit.utils.validation import parse_u64, u256_from_hex
from mmr_toolkit.verifier.gateway import VerifierGateway
from mmr_toolkit.verifier.submitter import MMRProofSubmitter
from mmr_toolkit.verifier.web3_verifier import Web3Groth16Verifier


def _parse_proof_element(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return int(value, 0)
    raise InvalidInput(f"Invalid proof element: {value!r}")


def load_proof_file(
    path: str, ipfs_hash: Optional[str] = None
) -> Tuple[List[int], str]:
    """Read a proof file.

    Accepts either a bare list of elements or an object with "proof" and
    optionally "ipfs_hash". An explicit ipfs_hash argument wins.
    """
    data = load_json_file(path)
    if isinstance(data, list):
        elements, file_ipfs_hash = data, None
    elif isinstance(data, dict) and "proof" in data:
        elements, file_ipfs_hash = data["proof"], data.get("ipfs_hash")
    else:
        raise InvalidInput(f"{path}: expected a list or an object with 'proof'")

    try:
        proof = [_parse_proof_element(v) for v in elements]
    except ValueError as e:
        raise InvalidInput(f"{path}: {e}") from e

    reference = ipfs_hash or file_ipfs_hash
    if not reference:
        raise InvalidInput(f"{path}: no ipfs_hash given")
    return proof, reference


def _require_initialized(store: MMRStore) -> None:
    if not store.state.initialized or not store.get_verifier_address():
        raise ConfigurationException(
            "Store is not initialized; run `mmr-toolkit init` first"
        )


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_init(store: MMRStore, args: argparse.Namespace) -> None:
    verifier_address = (
        args.verifier_address or GlobalConstants.get_mmr_verifier_address()
    )
    min_update_interval = (
        args.min_update_interval
        if args.min_update_interval is not None
        else GlobalConstants.get_min_update_interval()
    )
    store.initialize(verifier_address, min_update_interval)
    console.print(
        f"Initialized store: verifier {store.get_verifier_address()}, "
        f"min update interval {min_update_interval}"
    )


def cmd_store_blockhash(store: MMRStore, args: argparse.Namespace) -> None:
    blockhash = u256_from_hex(args.blockhash)
    store.store_latest_blockhash_from_l1(args.block_number, blockhash)
    console.print(
        f"Stored L1 blockhash {format_hash(blockhash)} "
        f"for block {args.block_number}"
    )


def cmd_relay_blockhash(store: MMRStore, args: argparse.Namespace) -> None:
    block = int(args.block) if args.block.isdigit() else args.block
    web3_service = Web3Service.get_instance(args.chain_id)
    record = relay_latest_blockhash(
        store, web3_service, block, verify_header=not args.no_verify_header
    )
    console.print(
        f"Relayed L1 blockhash {format_hash(record.blockhash)} "
        f"for block {record.block_number}"
    )


def cmd_submit_proof(store: MMRStore, args: argparse.Namespace) -> None:
    _require_initialized(store)
    if args.ipfs_hash and len(args.proof_file) > 1:
        raise InvalidInput("--ipfs-hash can only be used with a single proof")

    submissions = [
        load_proof_file(path, args.ipfs_hash) for path in args.proof_file
    ]

    contract = (
        args.verifier_contract
        or GlobalConstants.get_groth16_verifier_address()
    )
    verifier = Web3Groth16Verifier(
        Web3Service.get_instance(args.chain_id), contract
    )
    # The gateway presents its own identity; the store decides if it is the
    # registered verifier
    gateway_address = (
        args.gateway_address or GlobalConstants.get_mmr_verifier_address()
    )
    gateway = VerifierGateway(
        gateway_address, store, verifier, store.event_log
    )
    submitter = MMRProofSubmitter(gateway, max_retries=args.max_retries)

    summary = submitter.submit_many(submissions)
    for error in summary.errors:
        style = "yellow" if error.severity.value == "warning" else "red"
        console.print(f"[{style}]{error.message}[/{style}]")
    console.print(
        f"Submitted {summary.submitted}/{summary.submitted + summary.failed} "
        f"proofs; latest MMR block {store.get_latest_mmr_block()}"
    )

    if args.output:
        save_json_output(summary.to_dict(), args.output)
    if summary.has_errors():
        raise SystemExit(1)


def cmd_mmr_state(store: MMRStore, args: argparse.Namespace) -> None:
    snapshot = store.get_mmr_state(args.batch_index)
    if args.json:
        console.print_json(data=snapshot.to_dict())
        return

    table = build_table(
        f"MMR batch {args.batch_index}",
        {"Field": "cyan", "Value": "white"},
    )
    table.add_row("Leaves count", str(snapshot.leaves_count))
    table.add_row("Root hash", format_hash(snapshot.root_hash))
    if args.batch_size:
        start, end = calculate_batch_bounds(args.batch_index, args.batch_size)
        table.add_row("Blocks", f"{start} - {end}")
        table.add_row(
            "Complete", str(is_batch_complete(snapshot, args.batch_size))
        )
    console.print(table)


def cmd_latest_block(store: MMRStore, args: argparse.Namespace) -> None:
    console.print(f"Latest MMR block: {store.get_latest_mmr_block()}")


def cmd_latest_blockhash(store: MMRStore, args: argparse.Namespace) -> None:
    record = store.get_latest_blockhash_from_l1()
    if args.json:
        console.print_json(data=record.to_dict())
        return
    console.print(
        f"Latest L1 blockhash: block {record.block_number}, "
        f"{format_hash(record.blockhash)}"
    )


def cmd_batch_bounds(store: MMRStore, args: argparse.Namespace) -> None:
    batch_size = args.batch_size or GlobalConstants.get_batch_size()
    batch_index = batch_index_for_block(args.block_number, batch_size)
    start, end = calculate_batch_bounds(batch_index, batch_size)
    console.print(
        f"Block {args.block_number} is in batch {batch_index} "
        f"(blocks {start} - {end})"
    )


def cmd_verify_roots(store: MMRStore, args: argparse.Namespace) -> None:
    raw: Dict[str, str] = load_json_file(args.roots_file)
    local_roots = {int(index): u256_from_hex(root) for index, root in raw.items()}
    verify_mmr_roots(store, local_roots)
    console.print(
        f"[green]{len(local_roots)} MMR roots match the store[/green]"
    )


def cmd_events(store: MMRStore, args: argparse.Namespace) -> None:
    event_type = EVENT_TYPES[args.type] if args.type else None
    events = store.event_log.events(event_type)
    if args.json:
        console.print_json(data=[event_to_dict(e) for e in events])
        return

    table = build_table(
        f"Events ({len(events)})", {"Event": "cyan", "Fields": "white"}
    )
    for event in events:
        fields = event_to_dict(event)
        name = fields.pop("event")
        rendered = ", ".join(
            f"{k}={format_short_hash(v) if k in HASH_FIELDS else v}"
            for k, v in fields.items()
        )
        table.add_row(name, rendered)
    console.print(table)


HASH_FIELDS = ("blockhash", "root_hash", "new_mmr_root")

READ_ONLY_COMMANDS = {
    "mmr-state",
    "latest-block",
    "latest-blockhash",
    "batch-bounds",
    "verify-roots",
    "events",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mmr-toolkit",
        description="Unified CLI for the MMR Toolkit",
    )
    parser.add_argument(
        "--state-file",
        type=str,
        default=None,
        help="State file (default: $MMR_STATE_FILE or mmr_state.json)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # init
    p_init = sub.add_parser("init", help="Initialize the store")
    p_init.add_argument("--verifier-address", type=str)
    p_init.add_argument("--min-update-interval", type=parse_u64)
    p_init.set_defaults(func=cmd_init)

    # store-blockhash
    p_sb = sub.add_parser(
        "store-blockhash", help="Record a reference L1 blockhash"
    )
    p_sb.add_argument("--block-number", type=parse_u64, required=True)
    p_sb.add_argument("--blockhash", type=str, required=True)
    p_sb.set_defaults(func=cmd_store_blockhash)

    # relay-blockhash
    p_rb = sub.add_parser(
        "relay-blockhash", help="Fetch an L1 blockhash over RPC and record it"
    )
    p_rb.add_argument("--chain-id", type=int, default=1)
    p_rb.add_argument(
        "--block", type=str, default="finalized", help="Number or tag"
    )
    p_rb.add_argument(
        "--no-verify-header",
        action="store_true",
        help="Skip recomputing the hash from the header",
    )
    p_rb.set_defaults(func=cmd_relay_blockhash)

    # submit-proof
    p_sp = sub.add_parser("submit-proof", help="Verify and apply MMR proofs")
    p_sp.add_argument("--proof-file", type=str, nargs="+", required=True)
    p_sp.add_argument("--ipfs-hash", type=str)
    p_sp.add_argument("--chain-id", type=int, default=1)
    p_sp.add_argument(
        "--verifier-contract",
        type=str,
        help="Groth16 verifier (default: $GROTH16_VERIFIER_ADDRESS)",
    )
    p_sp.add_argument(
        "--gateway-address",
        type=str,
        help="Gateway identity (default: $MMR_VERIFIER_ADDRESS)",
    )
    p_sp.add_argument("--max-retries", type=int, default=3)
    p_sp.add_argument("--output", type=str, help="Summary output filename")
    p_sp.set_defaults(func=cmd_submit_proof)

    # mmr-state
    p_ms = sub.add_parser("mmr-state", help="Show a batch snapshot")
    p_ms.add_argument("--batch-index", type=parse_u64, required=True)
    p_ms.add_argument("--batch-size", type=parse_u64)
    p_ms.add_argument("--json", action="store_true", help="Output JSON")
    p_ms.set_defaults(func=cmd_mmr_state)

    # latest-block
    p_lb = sub.add_parser("latest-block", help="Show the latest MMR block")
    p_lb.set_defaults(func=cmd_latest_block)

    # latest-blockhash
    p_lh = sub.add_parser(
        "latest-blockhash", help="Show the reference L1 blockhash"
    )
    p_lh.add_argument("--json", action="store_true", help="Output JSON")
    p_lh.set_defaults(func=cmd_latest_blockhash)

    # batch-bounds
    p_bb = sub.add_parser(
        "batch-bounds", help="Show which batch a block belongs to"
    )
    p_bb.add_argument("--block-number", type=parse_u64, required=True)
    p_bb.add_argument("--batch-size", type=parse_u64)
    p_bb.set_defaults(func=cmd_batch_bounds)

    # verify-roots
    p_vr = sub.add_parser(
        "verify-roots", help="Compare local batch roots with the store"
    )
    p_vr.add_argument(
        "--roots-file",
        type=str,
        required=True,
        help='JSON object {"<batch_index>": "0x<root>"}',
    )
    p_vr.set_defaults(func=cmd_verify_roots)

    # events
    p_ev = sub.add_parser("events", help="List emitted events")
    p_ev.add_argument("--type", type=str, choices=sorted(EVENT_TYPES))
    p_ev.add_argument("--json", action="store_true", help="Output JSON")
    p_ev.set_defaults(func=cmd_events)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        set_log_level("DEBUG")

    state_file = args.state_file or GlobalConstants.get_state_file()
    store = load_store(state_file)
    try:
        args.func(store, args)
    except Exception as e:
        console.print(f"[red]Error:[/red] {str(e)}")
        raise
    finally:
        if args.command not in READ_ONLY_COMMANDS:
            save_store(store, state_file)


if __name__ == "__main__":
    main()
