# Model profile export/import for ccgear
import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ccgear.codec import normalize_legacy_profile, profile_from_dict, profile_to_dict
from ccgear.errors import MalformedConfigError
from ccgear.models import ModelProfile, new_model_id
from ccgear.store import SettingsStore

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


@dataclass
class ImportReport:
    """Report from importing an export file.

    ABOUTME: skipped_duplicates counts entries whose modelId already existed
    ABOUTME: skipped_invalid counts entries without modelId or provider
    """
    imported: int = 0
    skipped_duplicates: int = 0
    skipped_invalid: int = 0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_export(models: list[ModelProfile], now: datetime | None = None) -> dict[str, Any]:
    """Build the export document for a list of profiles."""
    now = now or _utc_now()
    return {
        "version": EXPORT_VERSION,
        "exportedAt": now.isoformat().replace("+00:00", "Z"),
        "models": [profile_to_dict(p) for p in models],
    }


def default_export_filename(now: datetime | None = None) -> str:
    """Return ccgear-models-YYYY-MM-DD.json for the given day."""
    now = now or _utc_now()
    return f"ccgear-models-{now.strftime('%Y-%m-%d')}.json"


def export_models(models: list[ModelProfile], path: Path, now: datetime | None = None) -> Path:
    """Write profiles to an export file.

    ABOUTME: Uses 2-space indentation, creates parent directories

    Returns:
        Path written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_export(models, now), f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.debug(f"Exported {len(models)} model(s) to {path}")
    return path


def import_models(store: SettingsStore, raw_text: str) -> ImportReport:
    """Append the profiles of an export file to the store.

    ABOUTME: Entries whose modelId already exists are skipped and counted
    ABOUTME: Each imported entry gets a freshly generated id
    ABOUTME: Accepts the legacy inline-secret shape but never imports the secret

    Args:
        store: Store to add profiles to
        raw_text: Export file content

    Returns:
        ImportReport with counts

    Raises:
        MalformedConfigError: If the text is not JSON or has no 'models' list
    """
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise MalformedConfigError(f"Invalid JSON in import file: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("models"), list):
        raise MalformedConfigError("Import file has no 'models' list")

    report = ImportReport()
    for entry in data["models"]:
        if not isinstance(entry, dict):
            report.skipped_invalid += 1
            continue

        canonical, secret = normalize_legacy_profile(entry)
        if secret is not None:
            logger.warning("Ignoring inline apiKey in imported model; set apiKeyEnvVar instead")

        profile = profile_from_dict(canonical, profile_id=new_model_id())
        if not profile.model_id or not profile.provider:
            report.skipped_invalid += 1
            continue
        if store.has_model_id(profile.model_id):
            report.skipped_duplicates += 1
            continue

        if not profile.title:
            profile = replace(profile, title=profile.model_id)
        store.add_model(profile)
        report.imported += 1

    return report
