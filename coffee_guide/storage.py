import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Sequence

from coffee_guide.presets import Preset, from_record, to_record

logger = logging.getLogger(__name__)


class JsonPresetSlot:
    """
    The whole preset collection as one JSON list in a single file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Preset]:
        """
        Read presets from disk. Missing or corrupt file -> empty list;
        unusable records are skipped.
        """
        if not self.path.exists():
            return []
        try:
            data: Any = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("could not read %s, starting with no presets", self.path, exc_info=True)
            return []
        if not isinstance(data, list):
            logger.warning("%s does not hold a list, starting with no presets", self.path)
            return []

        presets: List[Preset] = []
        seen = set()
        for raw in data:
            try:
                preset = from_record(raw)
            except (ValueError, TypeError, KeyError) as exc:
                logger.warning("skipping preset record: %s", exc)
                continue
            if preset.id in seen:
                logger.warning("skipping duplicate preset id %s", preset.id)
                continue
            seen.add(preset.id)
            presets.append(preset)
        return presets

    def write(self, presets: Sequence[Preset]) -> bool:
        """
        Replace the file with the given presets. Returns False (and logs) if
        the write failed; callers keep their in-memory state.
        """
        text = json.dumps([to_record(p) for p in presets], ensure_ascii=False, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", delete=False, dir=self.path.parent, suffix=".tmp", encoding="utf-8"
            ) as tf:
                tf.write(text)
                tmp = Path(tf.name)
            os.replace(tmp, self.path)
        except OSError:
            logger.exception("failed to save presets to %s", self.path)
            return False
        return True
