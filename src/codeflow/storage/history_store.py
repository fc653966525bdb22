"""JSON-file storage for analysis history and saved flowcharts.

Each save writes two independent records, both keyed by the opaque
(owner_id, file_id) pair:

- an analysis record holding the whole analysis serialized as JSON
- a visualization record holding only the serialized flowchart
"""

import json
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..analyzers.base_analyzer import AnalysisResult


logger = logging.getLogger("codeflow.storage")

ANALYSIS_TYPE = "Code Flow Analysis"
VISUALIZATION_TYPE = "Flowchart"
STORE_FORMAT = "codeflow_history_v1"


class HistoryStoreError(Exception):
    """Raised when the history file cannot be read or written."""


@dataclass
class AnalysisRecord:
    """Stored analysis of one file."""
    id: str
    owner_id: str
    file_id: str
    analyzed_at: str
    explanation: str  # JSON of the full analysis
    analysis_type: str = ANALYSIS_TYPE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "fileId": self.file_id,
            "analysisType": self.analysis_type,
            "explanation": self.explanation,
            "analyzedAt": self.analyzed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisRecord":
        return cls(
            id=data["id"],
            owner_id=data["ownerId"],
            file_id=data["fileId"],
            analyzed_at=data["analyzedAt"],
            explanation=data.get("explanation", "{}"),
            analysis_type=data.get("analysisType", ANALYSIS_TYPE),
        )

    def summary(self) -> dict:
        """History entry with the stored analysis decoded."""
        return {
            "id": self.id,
            "analysisType": self.analysis_type,
            "analyzedAt": self.analyzed_at,
            "explanation": json.loads(self.explanation or "{}"),
        }


@dataclass
class VisualizationRecord:
    """Stored flowchart of one file."""
    id: str
    file_id: str
    generated_at: str
    visualization_data: str  # JSON of the flowchart
    owner_id: Optional[str] = None
    visualization_type: str = VISUALIZATION_TYPE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "fileId": self.file_id,
            "visualizationType": self.visualization_type,
            "visualizationData": self.visualization_data,
            "generatedAt": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VisualizationRecord":
        return cls(
            id=data["id"],
            owner_id=data.get("ownerId"),
            file_id=data["fileId"],
            generated_at=data["generatedAt"],
            visualization_data=data.get("visualizationData", "{}"),
            visualization_type=data.get("visualizationType", VISUALIZATION_TYPE),
        )


@dataclass
class SaveResult:
    """Ids of the records written by one save."""
    analysis_id: str
    visualization_id: str
    saved_at: str


class HistoryStore:
    """Stores analyses in a single JSON document on disk."""

    def __init__(self, path: Path, default_limit: int = 10, max_records: Optional[int] = 100):
        self.path = Path(path)
        self.default_limit = default_limit
        # Per owner; None keeps everything
        self.max_records = max_records
        self._lock = threading.Lock()

    def save(self, owner_id: str, file_id: str, result: AnalysisResult) -> SaveResult:
        """Persist an analysis and its flowchart.

        Raises:
            HistoryStoreError: If the store cannot be read or written
        """
        now = datetime.now(timezone.utc).isoformat()

        analysis = AnalysisRecord(
            id=uuid.uuid4().hex,
            owner_id=str(owner_id),
            file_id=str(file_id),
            analyzed_at=now,
            explanation=json.dumps(result.to_dict()),
        )
        visualization = VisualizationRecord(
            id=uuid.uuid4().hex,
            owner_id=str(owner_id),
            file_id=str(file_id),
            generated_at=now,
            visualization_data=json.dumps(result.flowchart.to_dict()),
        )

        with self._lock:
            data = self._read()
            data["analyses"].append(analysis.to_dict())
            data["visualizations"].append(visualization.to_dict())
            self._prune(data, analysis.owner_id)
            self._write(data)

        logger.debug(f"Saved analysis {analysis.id} for {owner_id}/{file_id}")
        return SaveResult(
            analysis_id=analysis.id,
            visualization_id=visualization.id,
            saved_at=now,
        )

    def history(self, owner_id: str, limit: Optional[int] = None) -> list[dict]:
        """Newest analyses of an owner first, with explanations decoded."""
        if limit is None:
            limit = self.default_limit

        with self._lock:
            data = self._read()

        records = [
            AnalysisRecord.from_dict(item)
            for item in reversed(data["analyses"])
            if item.get("ownerId") == str(owner_id)
        ]
        records.sort(key=lambda r: r.analyzed_at, reverse=True)
        return [record.summary() for record in records[:limit]]

    def visualizations(self, file_id: str) -> list[dict]:
        """Stored flowcharts of a file, newest first."""
        with self._lock:
            data = self._read()

        records = [
            VisualizationRecord.from_dict(item)
            for item in reversed(data["visualizations"])
            if item.get("fileId") == str(file_id)
        ]
        records.sort(key=lambda r: r.generated_at, reverse=True)
        return [
            {
                "id": record.id,
                "visualizationType": record.visualization_type,
                "generatedAt": record.generated_at,
                "flowchart": json.loads(record.visualization_data or "{}"),
            }
            for record in records
        ]

    def clear(self, owner_id: Optional[str] = None) -> int:
        """Remove the records of one owner, or every record.

        Returns:
            Number of analyses removed
        """
        with self._lock:
            data = self._read()
            before = len(data["analyses"])
            if owner_id is None:
                data = self._empty()
            else:
                for key in ("analyses", "visualizations"):
                    data[key] = [r for r in data[key] if r.get("ownerId") != str(owner_id)]
            self._write(data)

        removed = before - len(data["analyses"])
        logger.info(f"Cleared {removed} analyses" + (f" of {owner_id}" if owner_id else ""))
        return removed

    def _prune(self, data: dict, owner_id: str) -> None:
        """Drop the oldest records of an owner beyond max_records."""
        if not self.max_records:
            return
        for key in ("analyses", "visualizations"):
            owned = [i for i, r in enumerate(data[key]) if r.get("ownerId") == owner_id]
            stale = set(owned[:-self.max_records])
            if stale:
                data[key] = [r for i, r in enumerate(data[key]) if i not in stale]
                logger.debug(f"Pruned {len(stale)} {key} of {owner_id}")

    @staticmethod
    def _empty() -> dict:
        return {"format": STORE_FORMAT, "analyses": [], "visualizations": []}

    def _read(self) -> dict:
        if not self.path.exists():
            return self._empty()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise HistoryStoreError(f"Failed to read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise HistoryStoreError(f"Unexpected content in {self.path}")
        data.setdefault("analyses", [])
        data.setdefault("visualizations", [])
        return data

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.path)
        except OSError as e:
            raise HistoryStoreError(f"Failed to write {self.path}: {e}") from e
