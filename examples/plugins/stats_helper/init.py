# Sample extension: asset statistics.
#
# Copy this directory into your extensions folder. Every hook is optional;
# module-level variables persist for as long as the extension stays loaded.

name = "Asset statistics"
version = "1.0.0"
author = "Asset Manager Team"
description = "Counts created and deleted assets during a session"

total_created = 0
total_deleted = 0


def on_load():
    log("[stats] loaded")


def on_unload():
    log("[stats] unloaded")
    log("[stats] this session: %d created, %d deleted" % (total_created, total_deleted))


def on_app_started():
    log("[stats] application started")


def on_app_closing():
    log("[stats] application closing")


def on_asset_created(payload):
    global total_created
    total_created += 1
    log("[stats] asset created, %d so far" % total_created)

    try:
        asset = json_decode(payload)
    except ValueError:
        return
    if isinstance(asset, dict):
        log("[stats] name: %s" % asset.get("name", "unknown"))


def on_asset_updated(payload):
    log("[stats] asset updated")


def on_asset_deleted(record_id):
    global total_deleted
    total_deleted += 1
    log("[stats] asset deleted (id: %s), %d so far" % (record_id, total_deleted))


def get_stats():
    return {"created": total_created, "deleted": total_deleted}
