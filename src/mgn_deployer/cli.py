"""Command-line interface for mgn-deployer."""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from typing import Optional

from .config import AppConfig, load_config
from .protocol.tokens import WRAP_AMOUNT
from .tasks import TASKS
from .utils.logging import get_logger, set_verbose
from .workflow import DeploymentWorkflow, TaskRequest, summarize

logger = get_logger(__name__)

# 子命令 -> 任务名
DEPLOY_COMMANDS = {
    "deploy-core": "core",
    "deploy-router": "router",
    "deploy-stable-erc20": "stable-erc20",
    "deploy-weth": "weth",
}


@dataclass
class CLIContext:
    """Context captured from CLI arguments."""

    config: AppConfig
    network: Optional[str]
    output_dir: Optional[str]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mgn-deployer",
        description="Resumable deployment of the MGN protocol contracts.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON config file overriding defaults.",
    )
    parser.add_argument(
        "--network",
        type=str,
        default=None,
        help="Network name from the config (default: config default_network).",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory holding checkpoint/output JSON files.",
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Exit non-zero when any unit or call is left unresolved.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for command, task_name in DEPLOY_COMMANDS.items():
        task_parser = subparsers.add_parser(command, help=TASKS[task_name].description)
        task_parser.add_argument(
            "--redeploy", action="append", default=[], metavar="UNIT",
            help="Forget the recorded address of UNIT so it is deployed again (repeatable)",
        )

    wrap_parser = subparsers.add_parser(
        "wrap-ether", help="Deposit native currency into the recorded WETH contract"
    )
    wrap_parser.add_argument(
        "--amount", type=int, default=WRAP_AMOUNT, help="Amount in wei"
    )

    status_parser = subparsers.add_parser(
        "status", help="Show which units of a task are recorded in its checkpoint"
    )
    status_parser.add_argument("task", choices=sorted(TASKS))

    return parser


def _build_context(args: argparse.Namespace) -> CLIContext:
    config = load_config(args.config)
    return CLIContext(
        config=config,
        network=args.network,
        output_dir=args.output_dir,
    )


def handle_status_command(args: argparse.Namespace, workflow: DeploymentWorkflow, context: CLIContext) -> int:
    path, states = workflow.status(args.task, context.network)
    recorded = sum(1 for state in states if state.identifier)

    print(f"\n{'='*70}")
    print(f"📄 Checkpoint: {path}")
    print(f"📊 Recorded:   {recorded}/{len(states)}")
    print(f"{'='*70}")
    for state in states:
        icon = "✅" if state.identifier else "⏳"
        print(f"{icon} {state.name:<26} {state.kind:<24} {state.identifier or 'pending'}")
    print(f"{'='*70}\n")
    return 0


def dispatch_command(args: argparse.Namespace) -> int:
    set_verbose(args.verbose)
    context = _build_context(args)
    workflow = DeploymentWorkflow(context.config, output_dir=context.output_dir)

    if args.command == "status":
        return handle_status_command(args, workflow, context)

    if args.command == "wrap-ether":
        if workflow.wrap_ether(context.network, amount=args.amount):
            return 0
        logger.error("Wrapping failed")
        return 1

    if args.command in DEPLOY_COMMANDS:
        request = TaskRequest(
            task=DEPLOY_COMMANDS[args.command],
            network=context.network,
            redeploy=list(args.redeploy),
        )
        outcome = workflow.run_task(request)
        logger.info("Summary:\n%s", json.dumps(summarize(outcome), indent=2))
        if args.strict and not outcome.complete:
            return 1
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


def run_cli(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return dispatch_command(args)
