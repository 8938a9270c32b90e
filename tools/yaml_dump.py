"""Mirror generated JSON fixtures as YAML for human review."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent


class PlainDumper(yaml.SafeDumper):
    pass


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=None)


PlainDumper.add_representer(str, _str_representer)


def dump_yaml(data: dict) -> str:
    return yaml.dump(data, Dumper=PlainDumper, sort_keys=False, width=4096)


def write_yaml(path: Path, data: dict) -> None:
    path.write_text(dump_yaml(data))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--fixtures", type=Path, default=ROOT / "fixtures")
    parser.add_argument("--out", type=Path, default=ROOT / "fixtures_yaml")
    args = parser.parse_args()

    count = 0
    for path in sorted(args.fixtures.rglob("*.json")):
        target = args.out / path.relative_to(args.fixtures).with_suffix(".yaml")
        target.parent.mkdir(parents=True, exist_ok=True)
        write_yaml(target, json.loads(path.read_text()))
        count += 1
    print(f"Wrote {count} YAML file(s) to {args.out}")


if __name__ == "__main__":
    main()
