"""
Reading and writing resume documents on disk.

JSON files are read with the standard json module; YAML files through OmegaConf,
the same loader used for every other structured config in folio.
"""

import json
from pathlib import Path
from typing import Union

from omegaconf import OmegaConf

from folio.contexts.schema.logger import log_document_loaded
from folio.contexts.schema.resume_data_structure import ResumeDocument
from folio.exceptions import DocumentValidationError

YAML_SUFFIXES = (".yaml", ".yml")


def load_document(path: Union[str, Path]) -> ResumeDocument:
    """
    Load a resume document from a JSON or YAML file.

    Args:
        path: Path to a .json, .yaml or .yml file in JSON Resume shape

    Returns:
        ResumeDocument instance

    Raises:
        FileNotFoundError: If path does not exist
        DocumentValidationError: If the file is not a valid resume document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Resume document not found: {path}")

    if path.suffix.lower() in YAML_SUFFIXES:
        data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    else:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DocumentValidationError(f"invalid JSON in {path.name}: {e}") from e

    document = ResumeDocument.from_dict(data)
    log_document_loaded(path, document)
    return document


def dump_document(document: ResumeDocument, path: Union[str, Path]) -> Path:
    """Write a document to JSON or YAML depending on the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() in YAML_SUFFIXES:
        OmegaConf.save(OmegaConf.create(document.to_dict()), path)
    else:
        path.write_text(json.dumps(document.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path
