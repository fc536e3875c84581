"""
Loading of math Q&A datasets.

Records are returned as raw dictionaries; validation happens per record at
indexing time so that one broken row does not prevent loading the rest.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import coloredlogs
import yaml

# Configure logger
logger = logging.getLogger(__name__)
coloredlogs.install(
    level="INFO",
    logger=logger,
    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

MATHSTACK_QA_TOTAL_SIZE = 951820
MATHSTACK_QA_FEATURES = ["qid", "question", "author", "author_id", "answer"]


@dataclass
class MathQADataset:
    data: List[Dict[str, Any]]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.data)


def generate_sample_dataset(sample_size: int = 5000) -> MathQADataset:
    """Build a synthetic MathStack-QA style sample for demos and smoke tests."""
    data = [
        {
            "qid": i,
            "question": f"Sample math question {i}",
            "answer": f"Sample math answer {i} with equation $E = mc^2$",
        }
        for i in range(sample_size)
    ]
    metadata = {
        "source": "sample",
        "totalSize": MATHSTACK_QA_TOTAL_SIZE,
        "processedSize": sample_size,
        "features": MATHSTACK_QA_FEATURES,
    }
    logger.info(f"Generated {len(data)} sample entries")
    return MathQADataset(data=data, metadata=metadata)


def _read_jsonl(path: Path) -> List[Any]:
    records = []
    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                # Keep a placeholder so the indexer counts and skips the row
                logger.error(f"Error parsing JSON on line {line_number} of {path}")
                records.append({"line": line_number, "raw": line.rstrip("\n")})
    return records


def load_dataset(path: Union[str, Path]) -> MathQADataset:
    """
    Load a dataset from a .json, .jsonl, .yaml or .yml file.

    JSON and YAML files may hold either a list of records or a dictionary with
    a ``data`` (or ``records``) list and optional ``metadata``.

    Args:
        path: Path to the dataset file

    Returns:
        MathQADataset with the raw records

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file type or top-level structure is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    logger.info(f"Loading dataset from {path}...")
    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        raw: Any = _read_jsonl(path)
    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    elif suffix in (".yaml", ".yml"):
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported dataset file type: {path.suffix}")

    metadata: Dict[str, Any] = {"source": str(path)}
    data = raw
    if isinstance(raw, dict):
        data = raw.get("data", raw.get("records"))
        metadata.update(raw.get("metadata") or {})
    if not isinstance(data, list):
        raise ValueError(f"Unexpected data format in {path}: {type(raw).__name__}")

    metadata["processedSize"] = len(data)
    logger.info(f"Loaded {len(data)} entries from {path.name}")
    return MathQADataset(data=data, metadata=metadata)
