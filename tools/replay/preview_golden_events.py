from __future__ import annotations

import argparse
import glob
import json
import sys
from pathlib import Path

# Allow running from repo root without installing as a package.
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from eventcompat.compat import patch_v1_compat
from eventcompat.contracts.validation import validate_envelope_dict
from eventcompat.core.errors import EventCompatError
from eventcompat.core.models import CloudEvent


def _iter_event_files(root: Path) -> list[Path]:
    return [Path(p) for p in sorted(glob.glob(str(root / "*.json")))]


def main() -> None:
    ap = argparse.ArgumentParser(description="Show the v1 (legacy) view of golden CloudEvents.")
    ap.add_argument("--events-dir", default=str(Path("contracts") / "golden_events" / "pubsub"))
    ap.add_argument("--decode-json", action="store_true", help="Also print message.json for Pub/Sub events.")
    ap.add_argument(
        "--fail-on-invalid",
        action="store_true",
        help="By default invalid (dirty) golden events are skipped. Use this flag to fail fast instead.",
    )
    args = ap.parse_args()

    root = Path(args.events_dir)
    files = _iter_event_files(root)
    if not files:
        raise SystemExit(f"no golden events found under {root}")

    for fp in files:
        ev = json.loads(fp.read_text(encoding="utf-8"))
        try:
            validate_envelope_dict(ev)
            patched = patch_v1_compat(CloudEvent.from_dict(ev))
        except EventCompatError as e:
            if args.fail_on_invalid:
                raise
            print(f"[skip-invalid] {fp.name}: {e}")
            continue

        if not patched.has_view("context"):
            print(f"[passthrough] {fp.name}: {patched.type}")
            continue

        out = {"context": patched.context.to_dict(), "message": patched.message.to_dict()}
        if args.decode_json:
            out["json"] = patched.message.json
        print(f"[v1] {fp.name}")
        print(json.dumps(out, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
