"""
Drive the plugin runtime the way the storage layer does.

Usage:
    python examples/host_demo.py
"""

from __future__ import annotations

import uuid
from pathlib import Path

from assetkit import PluginHost, RuntimeConfig, setup_logging
from assetkit.events import RecordCreated, RecordDeleted, RecordUpdated, serialize_record

PLUGINS_DIR = Path(__file__).parent / "plugins"


def main() -> None:
    setup_logging("INFO")

    config = RuntimeConfig(
        extensions_dir=PLUGINS_DIR,
        state_file=Path.cwd() / "demo-state.json",
    )

    with PluginHost(config) as host:
        for ext in host.list_extensions():
            print(f"{ext['id']}: {ext['name']} v{ext['version']} enabled={ext['enabled']}")

        asset_id = str(uuid.uuid4())
        asset = {"id": asset_id, "name": "Savings account", "value": 1200.0, "currency": "EUR"}

        host.notify(RecordCreated(serialize_record(asset)))
        asset["value"] = 1350.0
        host.notify(RecordUpdated(serialize_record(asset)))
        report = host.notify(RecordDeleted(asset_id))
        print(f"delete delivered to: {report.delivered}")


if __name__ == "__main__":
    main()
