"""
CI configuration file (.travis.yml).

Loads the YAML, finds openssl decrypt steps in the script stages and
inserts the decrypt-before-test step. Comments in the file are not
preserved on save.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List

import yaml

from citoken.domain.config.workflow_config import CI_STAGES
from citoken.domain.consistency import DecryptStep, format_decrypt_command, parse_decrypt_command
from citoken.domain.errors import ManifestError

logger = logging.getLogger(__name__)

SCRIPT_STAGES = CI_STAGES


def _items(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


def _commands(value: Any) -> List[str]:
    return [item for item in _items(value) if isinstance(item, str)]


class CIConfigFile:
    """The CI configuration held in memory until save()."""

    def __init__(self, path: Path, data: Dict[str, Any] | None = None):
        self.path = path
        self.data: Dict[str, Any] = data if data is not None else {}
        self._dirty = False

    @classmethod
    def load(cls, path: Path) -> "CIConfigFile":
        """
        Read the file; a missing or empty file is an empty mapping.

        Raises:
            ManifestError: If the file is not UTF-8 text or not a YAML mapping
        """
        if not path.exists():
            return cls(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML in {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise ManifestError(f"{path} is not valid UTF-8 text: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ManifestError(f"{path} must contain a YAML mapping at the top level")
        return cls(path, data)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def _sections(self) -> Iterator[Dict[str, Any]]:
        yield self.data
        for key in ("jobs", "matrix"):
            block = self.data.get(key)
            if isinstance(block, dict):
                for job in block.get("include") or []:
                    if isinstance(job, dict):
                        yield job

    def decrypt_steps(self) -> List[DecryptStep]:
        """Every openssl decrypt command in the script stages, including job overrides."""
        steps: List[DecryptStep] = []
        for section in self._sections():
            for stage in SCRIPT_STAGES:
                for command in _commands(section.get(stage)):
                    step = parse_decrypt_command(command)
                    if step is not None:
                        steps.append(step)
        return steps

    def ensure_decrypt_step(
        self,
        encrypted: str,
        plaintext: str,
        key_var: str,
        iv_var: str,
        stage: str = "before_install",
    ) -> bool:
        """
        Make the top-level stage hold exactly one decrypt step for this artifact.

        Stale decrypt steps writing the plaintext (other input, other keys,
        duplicates) are dropped first. Returns whether the file changed.
        """
        wanted = format_decrypt_command(encrypted, plaintext, key_var, iv_var)
        changed = False

        for section in self._sections():
            top_level = section is self.data
            for name in SCRIPT_STAGES:
                items = _items(section.get(name))
                if not items:
                    continue
                kept = []
                for command in items:
                    if not isinstance(command, str):
                        kept.append(command)
                        continue
                    step = parse_decrypt_command(command)
                    stale = command != wanted or not top_level or name != stage
                    if step is not None and step.output_path == plaintext and stale:
                        logger.info("Dropping stale decrypt step from %s: %s", name, command)
                        continue
                    kept.append(command)
                if len(kept) != len(items):
                    section[name] = kept
                    changed = True

        existing = _items(self.data.get(stage))
        if existing.count(wanted) != 1:
            without = [command for command in existing if command != wanted]
            self.data[stage] = [wanted] + without
            changed = True

        if changed:
            self._dirty = True
        return changed

    def save(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.data, f, default_flow_style=False, sort_keys=False)
        self._dirty = False
        logger.info("Saved %s", self.path)
