"""Bootstrap helpers and the ``locpopup`` console script."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from concurrent.futures import Executor
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_type_hints

from .core.controller import LocPopupController, PassOutcome
from .events import EventSubscriber
from .host.client import NvimQueryClient
from .host.replay import ReplayStep, ScriptedSession, load_transcript
from .host.types import AggregateCounts
from .services.settings import ENV_PREFIX, Settings, SettingsStore
from .ui.popup_widget import LintStatusIndicator, LocPopupWidget
from .utils.logging import setup_logging

_LOGGER = logging.getLogger(__name__)
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}


@dataclass(slots=True)
class PopupRuntime:
    """Everything :func:`build_runtime` wires together."""

    controller: LocPopupController
    subscriber: EventSubscriber
    popup: LocPopupWidget
    status: LintStatusIndicator
    notifier: Any = None

    def run(self) -> bool:
        """Subscribe and serve host notifications until the session loop stops."""

        return self.subscriber.run()


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def build_runtime(
    session: Any,
    settings: Settings,
    *,
    enable_qt: bool = True,
    executor: Executor | None = None,
) -> PopupRuntime:
    """Wire client, controller, widgets and subscriber around ``session``.

    With a live ``QApplication`` the controller notifies through Qt signals
    so widgets are only touched on the GUI thread; otherwise widgets are
    updated directly.
    """

    client = NvimQueryClient(session, location_window=settings.location_window)
    popup = LocPopupWidget(palette=settings.palette(), enable_qt=enable_qt)
    status = LintStatusIndicator()
    notifier: Any = None

    if popup.widget is not None:
        from .ui.signals import QtRedrawNotifier

        notifier = QtRedrawNotifier()
        controller = LocPopupController(client, notifier, status_sink=notifier.forward_counts)
        notifier.redraw_requested.connect(lambda: popup.render(controller.state))
        notifier.counts_changed.connect(
            lambda errors, warnings: status.update_counts(AggregateCounts(errors, warnings))
        )
    else:

        def _redraw() -> None:
            popup.render(controller.state)

        controller = LocPopupController(client, _redraw, status_sink=status.update_counts)

    subscriber = EventSubscriber(
        session,
        controller,
        method=settings.notification_method,
        enabled=settings.enabled,
        executor=executor,
    )
    return PopupRuntime(
        controller=controller,
        subscriber=subscriber,
        popup=popup,
        status=status,
        notifier=notifier,
    )


def replay_transcript(
    steps: Sequence[ReplayStep],
    settings: Settings,
    *,
    stream: TextIO | None = None,
) -> list[PassOutcome]:
    """Run one pass per recorded step and write a JSON line per result."""

    destination = stream or sys.stdout
    session = ScriptedSession(steps)
    runtime = build_runtime(session, settings, enable_qt=False)
    runtime.subscriber.subscribe()
    outcomes: list[PassOutcome] = []
    for index, step in enumerate(steps):
        session.load(step)
        outcome = runtime.subscriber.handle_notification(settings.notification_method, ["update"])
        if not isinstance(outcome, PassOutcome):
            # Disabled popup or unmatched notification; nothing ran.
            continue
        outcomes.append(outcome)
        record = {
            "step": index,
            "visible": outcome.state.visible,
            "category": outcome.state.category if outcome.state.visible else None,
            "text": outcome.state.text if outcome.state.visible else None,
            "errors": outcome.counts.errors if outcome.counts else None,
            "warnings": outcome.counts.warnings if outcome.counts else None,
            "redraw": outcome.notified,
            "skipped": outcome.skipped,
        }
        destination.write(json.dumps(record, sort_keys=True))
        destination.write("\n")
    return outcomes


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the ``locpopup`` console script."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    settings_path = args.settings_path or os.environ.get("LOCPOPUP_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return 2

    settings = load_settings(resolved_path, store=store, overrides=cli_overrides or None)
    setup_logging(_env_flag("LOCPOPUP_DEBUG") or settings.debug_logging)

    if args.dump_settings:
        _dump_settings(settings, store, overrides=cli_overrides)
        return 0

    if args.replay:
        try:
            steps = load_transcript(args.replay)
        except (OSError, ValueError) as exc:
            print(f"Unable to read transcript {args.replay}: {exc}", file=sys.stderr)
            return 2
        replay_transcript(steps, settings)
        return 0

    parser.print_usage(sys.stderr)
    return 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locpopup",
        description="Inspect location popup settings or replay recorded host sessions.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.locpopup/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings (repeatable).",
    )
    parser.add_argument(
        "--replay",
        metavar="TRANSCRIPT",
        help="Replay a JSON transcript of host responses, one pass per step.",
    )
    return parser


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if not items:
        return overrides

    fields = Settings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(Settings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        overrides[key] = _coerce_value(type_hints.get(key), raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    if annotation is bool:
        return _parse_bool(raw_value)
    if annotation is int:
        return int(raw_value, 10)
    if annotation is str:
        return raw_value
    try:
        payload = json.loads(raw_value or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError("Mapping overrides must be valid JSON objects") from exc
    if not isinstance(payload, dict):
        raise ValueError("Mapping overrides must be valid JSON objects")
    return payload


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": sorted(name for name in os.environ if name.startswith(ENV_PREFIX)),
    }
    json.dump({"settings": asdict(settings), "meta": metadata}, destination, indent=2)
    destination.write("\n")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
