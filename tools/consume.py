"""Consume fixtures and validate against the Python specs."""

from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tools"))

from htlc_spec.encoding import pack, unpack  # noqa: E402
from htlc_spec.state_transition import apply_tx  # noqa: E402
from fixtures_io import state_from_json, state_to_json, tx_from_json  # noqa: E402


def _check_state_cases(path: Path) -> list[str]:
    failures: list[str] = []
    data = json.loads(path.read_text())

    for case in data.get("cases", []):
        pre_state = state_from_json(case["pre_state"])
        tx = tx_from_json(case["tx"])
        post_state, result = apply_tx(pre_state, tx)

        expected = case["expected"]
        if result.ok != expected["ok"]:
            failures.append(f"{case['name']}: ok_mismatch")
            continue

        actual_err = result.error.code.name if result.error else None
        if actual_err != expected["error"]:
            failures.append(f"{case['name']}: error_mismatch")
            continue

        actual_digest = state_to_json(post_state)["state_digest"]
        if actual_digest != expected["post_state"]["state_digest"]:
            failures.append(f"{case['name']}: state_digest_mismatch")

    return failures


def _check_wire_vectors(path: Path) -> list[str]:
    failures: list[str] = []
    data = json.loads(path.read_text())
    for vec in data.get("vectors", []):
        raw = bytes.fromhex(vec["wire_hex"])
        if pack(unpack(raw)).hex() != vec["wire_hex"]:
            failures.append(f"{vec['name']}: wire_mismatch")
    return failures


def main() -> None:
    fixtures = ROOT / "fixtures"

    failures: list[str] = []

    for path in sorted(fixtures.rglob("*.json")):
        if path.name == "wire_format.json":
            failures.extend(_check_wire_vectors(path))
        elif "transactions" in path.relative_to(fixtures).parts:
            failures.extend(_check_state_cases(path))

    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print("All fixtures passed")


if __name__ == "__main__":
    main()
