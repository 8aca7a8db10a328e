"""Session export: versioned JSON documents of a training session."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import Draft7Validator

from app.events import EventBus
from app.pipeline.analysis.session_summary import TrainingSession
from configs.settings import SessionConfig
from contracts import GlideEfficiency, SessionInfo, SessionSummary, ThrowMetrics
from contracts.versioning import SCHEMA_VERSION, make_envelope
from exceptions import ExportError
from log_config.logger import get_logger
from metrics.delivery_metrics import finite_or_zero

logger = get_logger(__name__)

_NUMBER = {"type": "number"}

EXPORT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["schema_version", "payload"],
    "properties": {
        "schema_version": {"type": "string"},
        "app_version": {"type": "string"},
        "payload": {
            "type": "object",
            "required": ["session", "throws"],
            "properties": {
                "session": {
                    "type": "object",
                    "required": ["id", "name", "startTime"],
                    "properties": {
                        "id": {"type": "string"},
                        "name": {"type": "string"},
                        "startTime": {"type": "string"},
                        "notes": {"type": ["string", "null"]},
                    },
                },
                "throws": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["id"],
                        "properties": {
                            "id": {"type": "string"},
                            "timestamp": {"type": "string"},
                            "sessionId": {"type": "string"},
                            "pushoffStrength": _NUMBER,
                            "peakVelocity": _NUMBER,
                            "slideDuration": _NUMBER,
                            "decelRate": _NUMBER,
                            "stabilityScore": _NUMBER,
                            "glideEfficiency": {
                                "type": "string",
                                "enum": [g.value for g in GlideEfficiency],
                            },
                        },
                    },
                },
                "exportDate": {"type": "string"},
                "summary": {"type": "object"},
            },
        },
    },
}


def throw_to_record(metrics: ThrowMetrics, session_id: str) -> Dict[str, Any]:
    """Flatten a throw into its stored camelCase record."""
    return {
        "id": metrics.id,
        "timestamp": metrics.timestamp,
        "sessionId": session_id,
        "pushoffStrength": metrics.pushoff_strength,
        "peakVelocity": metrics.peak_velocity,
        "slideDuration": metrics.slide_duration,
        "decelRate": metrics.decel_rate,
        "stabilityScore": metrics.stability_score,
        "glideEfficiency": metrics.glide_efficiency.value,
    }


def _stored_number(record: Dict[str, Any], key: str) -> float:
    value = record.get(key)
    if value is None:
        return 0.0
    number = finite_or_zero(value)
    if number != float(value):
        logger.warning(f"Non-finite {key} in throw {record['id']} replaced with 0")
    return number


def throw_from_record(record: Dict[str, Any]) -> ThrowMetrics:
    """Rebuild a throw from a stored record.

    Missing or non-finite numeric fields read as 0 and a missing glide
    label as Good.
    """
    return ThrowMetrics(
        id=str(record["id"]),
        timestamp=str(record.get("timestamp", "")),
        pushoff_strength=_stored_number(record, "pushoffStrength"),
        peak_velocity=_stored_number(record, "peakVelocity"),
        slide_duration=_stored_number(record, "slideDuration"),
        decel_rate=_stored_number(record, "decelRate"),
        stability_score=_stored_number(record, "stabilityScore"),
        glide_efficiency=GlideEfficiency(record.get("glideEfficiency") or GlideEfficiency.GOOD.value),
    )


def session_to_record(info: SessionInfo) -> Dict[str, Any]:
    record = {"id": info.id, "name": info.name, "startTime": info.start_time}
    if info.notes is not None:
        record["notes"] = info.notes
    return record


def summary_to_record(summary: SessionSummary) -> Dict[str, Any]:
    return {
        "throwCount": summary.throw_count,
        "avgPushoff": summary.avg_pushoff,
        "avgVelocity": summary.avg_velocity,
        "avgStability": summary.avg_stability,
        "bestGlide": summary.best_glide,
        "consistency": summary.consistency,
        "improvement": summary.improvement.value,
    }


def build_session_export(session: TrainingSession, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the versioned export document for ``session``."""
    now = now or datetime.now(timezone.utc)
    info = session.info
    throws = session.get_throws()
    return make_envelope({
        "session": session_to_record(info),
        "throws": [throw_to_record(t, info.id) for t in throws],
        "exportDate": now.isoformat(),
        "summary": summary_to_record(session.get_summary()),
    })


def export_filename(session_id: str, when: Optional[datetime] = None) -> str:
    """File name of the form ``curling-session-<id>-<YYYY-MM-DDTHH-MM-SS>.json``."""
    when = when or datetime.now(timezone.utc)
    return f"curling-session-{session_id}-{when.strftime('%Y-%m-%dT%H-%M-%S')}.json"


def write_session_export(
    session: TrainingSession,
    out_dir: Path,
    now: Optional[datetime] = None,
) -> Path:
    """Write the export document into ``out_dir`` and return its path.

    Raises:
        ExportError: If the file cannot be written
    """
    now = now or datetime.now(timezone.utc)
    document = build_session_export(session, now)
    out_dir = Path(out_dir)
    path = out_dir / export_filename(session.info.id, now)
    try:
        text = json.dumps(document, indent=2, allow_nan=False)
        out_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to write session export to {path}: {e}")
        raise ExportError(f"Failed to write session export: {e}") from e

    logger.info(f"Exported {len(document['payload']['throws'])} throws to {path}")
    return path


def validate_export(document: Dict[str, Any]) -> None:
    """Check an export document against EXPORT_SCHEMA.

    Raises:
        ExportError: Listing every schema violation
    """
    errors = sorted(Draft7Validator(EXPORT_SCHEMA).iter_errors(document), key=lambda e: [str(p) for p in e.path])
    if errors:
        messages = [
            f"{'.'.join(str(p) for p in e.path) or 'root'}: {e.message}" for e in errors
        ]
        raise ExportError("Invalid session export:\n" + "\n".join(f"  - {m}" for m in messages))

    version = document["schema_version"]
    if version.split(".")[0] != SCHEMA_VERSION.split(".")[0]:
        raise ExportError(f"Unsupported export schema version {version} (expected {SCHEMA_VERSION})")


def load_session_export(
    path: Path,
    config: Optional[SessionConfig] = None,
    event_bus: Optional[EventBus] = None,
) -> TrainingSession:
    """Restore a training session from an export file.

    Raises:
        ExportError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ExportError(f"Session export not found: {path}")
    try:
        document = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ExportError(f"Failed to read session export {path}: {e}") from e

    validate_export(document)

    payload = document["payload"]
    session = payload["session"]
    info = SessionInfo(
        id=session["id"],
        name=session["name"],
        start_time=session["startTime"],
        notes=session.get("notes"),
    )
    throws = [throw_from_record(r) for r in payload["throws"]]
    logger.info(f"Loaded {len(throws)} throws for {info.id} from {path}")
    return TrainingSession(info=info, config=config, event_bus=event_bus, throws=throws)
