import contextlib
import json
import logging
import os
import secrets
import string
import tempfile
import threading

from pydantic import ValidationError

from .errors import InvalidInput, NotFound, PersistFailure
from .models import Project, ProjectDraft
from .samples import now_ms, sample_projects

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def to_base36(number):
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_project_id(taken=()):
    while True:
        suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
        candidate = f"p_{to_base36(now_ms())}{suffix}"
        if candidate not in taken:
            return candidate


def _dump(records):
    return json.dumps(records, indent=2, ensure_ascii=False)


class ProjectStore:
    """File-backed store holding the whole project list as one JSON array.

    Every mutation is a full read-modify-write; the file only ever changes
    through ``replace_all``, which writes a temp sibling and renames it into
    place.
    """

    def __init__(self, data_file, legacy_file=None):
        self.data_file = data_file
        self.legacy_file = legacy_file
        self._lock = threading.Lock()

    def _atomic_write(self, text):
        # Each write gets its own temp sibling so concurrent writers never share one
        tmp = None
        with self._lock:
            try:
                fd, tmp = tempfile.mkstemp(
                    dir=os.path.dirname(os.path.abspath(self.data_file)),
                    prefix=os.path.basename(self.data_file) + ".",
                    suffix=".tmp",
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(text)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self.data_file)
                return True
            except OSError:
                logger.exception("atomic write of %s failed", self.data_file)
                if tmp is not None:
                    with contextlib.suppress(OSError):
                        os.remove(tmp)
                return False

    def _migrate_legacy(self):
        if not self.legacy_file or not os.path.exists(self.legacy_file):
            return False
        try:
            with open(self.legacy_file, "r", encoding="utf-8") as f:
                parsed = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed parsing legacy file %s; ignoring migration: %s", self.legacy_file, e)
            return False

        if not isinstance(parsed, list):
            logger.warning("Legacy file %s is not an array; ignoring legacy file", self.legacy_file)
            return False

        if not self._atomic_write(_dump(parsed)):
            return False
        logger.info("Migrated %s -> %s", os.path.basename(self.legacy_file), os.path.basename(self.data_file))
        return True

    def ensure_initialized(self):
        """Create the data file if missing, from the legacy file or the samples."""
        if os.path.exists(self.data_file):
            return
        if self._migrate_legacy():
            return
        if self._atomic_write(_dump(sample_projects())):
            logger.info("Created %s with sample projects", os.path.basename(self.data_file))

    def read_all(self):
        try:
            if not os.path.exists(self.data_file):
                self.ensure_initialized()
            with open(self.data_file, "r", encoding="utf-8") as f:
                raw = f.read()
            parsed = json.loads(raw) if raw else []
            if not isinstance(parsed, list):
                raise ValueError(f"expected a JSON array, got {type(parsed).__name__}")
            return parsed
        except (OSError, ValueError):
            # Never fail a read: serve the samples for this call only
            logger.exception("read of %s failed; serving sample projects", self.data_file)
            return sample_projects()

    def replace_all(self, records):
        try:
            text = _dump(list(records))
        except (TypeError, ValueError):
            logger.exception("could not serialize %d records", len(records))
            return False
        return self._atomic_write(text)

    def create(self, payload):
        if not isinstance(payload, dict):
            raise InvalidInput("Invalid JSON payload")
        try:
            draft = ProjectDraft.model_validate(payload)
        except ValidationError as e:
            raise InvalidInput("Invalid JSON payload") from e
        if not draft.title or not draft.desc:
            raise InvalidInput("title and desc are required")

        projects = self.read_all()
        taken = {p.get("id") for p in projects if isinstance(p, dict)}
        project = Project(
            id=new_project_id(taken),
            title=draft.title,
            budget=draft.budget,
            skills=draft.skills,
            desc=draft.desc,
            created=now_ms(),
            owner=draft.owner,
        ).model_dump()

        projects.insert(0, project)
        if not self.replace_all(projects):
            raise PersistFailure("Failed to write data")
        return project

    def delete(self, project_id):
        projects = self.read_all()
        remaining = [p for p in projects if not (isinstance(p, dict) and p.get("id") == project_id)]
        if len(remaining) == len(projects):
            raise NotFound("Not found")
        if not self.replace_all(remaining):
            raise PersistFailure("Failed to write data")
        return project_id

    def reset(self):
        projects = sample_projects()
        if not self.replace_all(projects):
            raise PersistFailure("Failed to reset data")
        return projects
