"""routerctl: live status, scan, repeater association and reboot/reset.

Usage:
    routerctl                          # live status (SSID, signal, speed)
    routerctl --scan                   # live list of visible networks
    routerctl --connect HomeNet secret # repeat HomeNet once it is visible
    routerctl --reboot
    routerctl --reset
    routerctl --debug --host 192.168.0.1
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape

from routerctl import polling
from routerctl.association import RetryPolicy, associate_when_visible
from routerctl.config import Settings
from routerctl.display.renderer import FrameWriter
from routerctl.gateway.http import HttpGateway
from routerctl.router_common import AssociationTarget, RouterError

_LOGGER = logging.getLogger("routerctl")

EXIT_OK = 0
EXIT_FAILURE = 1


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="routerctl",
        description="Monitor and control a Wi-Fi router through its web API.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--scan",
        action="store_true",
        help="scan and display all the available wifi networks",
    )
    mode.add_argument(
        "--reboot",
        action="store_true",
        help="reboot the router",
    )
    mode.add_argument(
        "--reset",
        action="store_true",
        help="reset the router to factory defaults",
    )
    mode.add_argument(
        "--connect",
        nargs=2,
        metavar=("SSID", "PWD"),
        help="repeat the network SSID using passphrase PWD once it is visible",
    )
    parser.add_argument("--host", help="router address (default: 192.168.16.1)")
    parser.add_argument("--user", help="login user (default: admin)")
    parser.add_argument("--password", help="login password (default: admin)")
    parser.add_argument(
        "--interval",
        type=float,
        metavar="SECONDS",
        help="seconds between refreshes of the live views",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        metavar="N",
        help="scans before --connect gives up (0 = never give up)",
    )
    parser.add_argument(
        "--retry-delay",
        type=float,
        metavar="SECONDS",
        help="seconds between --connect scans",
    )
    parser.add_argument(
        "--strict-ssid",
        action="store_true",
        default=None,
        help="fail if the connected SSID cannot be read instead of showing a placeholder",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="disable bold/dim emphasis",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="enable debug logging to stderr and the debug log file",
    )
    return parser.parse_args(argv)


def _configure_logging(settings: Settings) -> None:
    log_format = "%(name)s: %(levelname)s: %(message)s"
    logging.basicConfig(level=logging.DEBUG, format=log_format, stream=sys.stderr)
    try:
        file_handler = logging.FileHandler(settings.debug_log, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)
    except OSError:
        pass  # Debug log file optional; stderr still works


def _build_settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env().override(
        host=args.host,
        user=args.user,
        password=args.password,
        retry_delay=args.retry_delay,
        strict_ssid=args.strict_ssid,
    )
    if args.max_attempts is not None:
        # 0 means "never give up", which override() cannot express
        settings = settings.model_copy(
            update={"max_attempts": args.max_attempts if args.max_attempts > 0 else None},
        )
    if args.interval is not None:
        settings = settings.override(
            status_interval=args.interval, scan_interval=args.interval,
        )
    return settings


def _dump_startup_config(args: argparse.Namespace, settings: Settings) -> None:
    """Log the effective configuration (call only when --debug)."""
    _LOGGER.debug(
        "CLI: scan=%s reboot=%s reset=%s connect=%s",
        args.scan, args.reboot, args.reset, args.connect[0] if args.connect else None,
    )
    _LOGGER.debug(
        "settings: host=%s user=%s password=%s timeout=%s",
        settings.host, settings.user, "***" if settings.password else "", settings.timeout,
    )
    _LOGGER.debug(
        "settings: status_interval=%s scan_interval=%s max_attempts=%s retry_delay=%s strict_ssid=%s",
        settings.status_interval,
        settings.scan_interval,
        settings.max_attempts,
        settings.retry_delay,
        settings.strict_ssid,
    )


def _report_fatal(console: Console, exc: RouterError) -> None:
    """Print *exc* to stderr."""
    console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")


def run(args: argparse.Namespace, gateway: HttpGateway | None = None) -> int:
    """Execute the mode selected by *args*; return the process exit code."""
    settings = _build_settings(args)
    if args.debug:
        _dump_startup_config(args, settings)

    console = Console()
    err_console = Console(stderr=True)
    emphasis = not args.no_color and sys.stdout.isatty()
    gateway = gateway or HttpGateway.from_settings(settings)
    failures: list[RouterError] = []

    def on_fatal(exc: RouterError) -> None:
        failures.append(exc)
        # Finish the last drawn line so the message does not overwrite it.
        sys.stdout.write("\n")
        sys.stdout.flush()
        _report_fatal(err_console, exc)

    try:
        gateway.login(settings.user, settings.password)

        if args.reboot:
            gateway.reboot()
            console.print("Reboot requested.")
            return EXIT_OK

        if args.reset:
            gateway.reset_to_defaults()
            console.print("Factory reset requested.")
            return EXIT_OK

        if args.connect:
            ssid, key = args.connect
            policy = RetryPolicy(max_attempts=settings.max_attempts, delay=settings.retry_delay)
            console.print(f"Searching for [bold]{escape(ssid)}[/bold]…")
            request = associate_when_visible(gateway, AssociationTarget(ssid, key), policy)
            console.print(
                f"Association with [bold]{escape(request.ssid)}[/bold] "
                f"({escape(request.security_mode)}/{escape(request.cipher)}, "
                f"channel {escape(request.channel)}) submitted."
            )
            # The router drops the session while it reconfigures.
            gateway.login(settings.user, settings.password)
            return EXIT_OK

        writer = FrameWriter(sys.stdout)
        if args.scan:
            polling.run(settings.scan_interval, polling.scan_frames(gateway), on_fatal, writer=writer)
        else:
            source = polling.StatusSource(
                gateway, strict_ssid=settings.strict_ssid, emphasis=emphasis,
            )
            polling.run(settings.status_interval, source, on_fatal, writer=writer)
    except RouterError as exc:
        _report_fatal(err_console, exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        sys.stdout.write("\n")
        sys.stdout.flush()
        return EXIT_OK

    return EXIT_FAILURE if failures else EXIT_OK


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``routerctl`` console script."""
    args = _parse_args(argv)
    if args.debug:
        _configure_logging(Settings.from_env())
    sys.exit(run(args))


if __name__ == "__main__":
    main()
