"""
Model synchronization — mirror the Episerver content types into TypeScript.

Flow:
    current user (advisory) → fetch overview → check names → remove stale
    models → fetch + generate + write each type (in parallel) → write
    TypeMapper.ts → wait for every write → SyncReport

Only a failed overview, colliding type names or an unusable model
directory stop the run.  A failed type fetch or write is logged,
recorded in the report and does not affect the other types.  Stale
models are removed before anything is written, so a fresh file can
never be deleted by the same run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from episync.adapters.base import AuthProvider, ContentSchemaClient
from episync.core.config.loader import SyncConfig
from episync.core.errors import EpisyncError, NameCollisionError
from episync.core.models.schema import TypeDefinition, TypeDefinitionData, is_network_error
from episync.core.models.sync import SyncReport
from episync.core.services.generators.model_file import generate_model_file, write_generated_file
from episync.core.services.generators.naming import check_name_collisions, interface_name
from episync.core.services.generators.type_registry import REGISTRY_NAME, generate_type_registry

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class ModelSyncError(EpisyncError):
    """A single content type could not be generated."""


class ModelSync:
    """Episerver model synchronization job.

    Args:
        client: Content Delivery schema client.
        model_path: Output directory for the generated files.
        auth: Optional session provider, only used to log who we are.
        max_workers: Upper bound on parallel type fetches.
    """

    def __init__(
        self,
        client: ContentSchemaClient,
        model_path: Path,
        auth: AuthProvider | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.client = client
        self.model_path = Path(model_path)
        self.auth = auth
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_config(cls, config: SyncConfig, max_workers: int = DEFAULT_MAX_WORKERS) -> ModelSync:
        """Build a job talking to the configured Episerver instance."""
        from episync.adapters.content_delivery import ContentDeliveryClient, TokenStorageAuth

        auth = TokenStorageAuth(config.root_dir, config.episerver_url)
        client = ContentDeliveryClient(config.episerver_url, auth=auth, insecure=config.insecure)
        return cls(client, config.model_path, auth=auth, max_workers=max_workers)

    # ── Run ─────────────────────────────────────────────────────

    def run(self) -> SyncReport:
        """Run the synchronization and wait until every file is written."""
        report = SyncReport(base_url=self.client.base_url, model_path=str(self.model_path))

        logger.info("Start: Episerver IContent model synchronization")
        logger.info("Using Episerver installed at: %s", self.client.base_url)
        report.user = self._current_user()

        try:
            self.model_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Unable to create model directory %s: %s", self.model_path, e)
            report.aborted = True
            report.errors.append(f"create {self.model_path}: {e}")
            return report

        logger.info("Retrieving content types")
        types = self.fetch_overview()
        if types is None:
            report.aborted = True
            report.errors.append("Unable to retrieve the content type overview")
            return report

        types = _unique_by_name(types)
        names = [t.name for t in types]
        report.type_names = names

        try:
            check_name_collisions(names)
        except NameCollisionError as e:
            logger.error("Aborting synchronization: %s", e)
            report.aborted = True
            report.errors.append(str(e))
            return report

        try:
            report.removed = self.clear_models([interface_name(n) for n in names], report.errors)
        except ModelSyncError as e:
            logger.error("Aborting synchronization: %s", e)
            report.aborted = True
            report.errors.append(str(e))
            return report

        logger.info("Start creating/updating %d model definitions", len(types))
        results: dict[str, str] = {}
        with ThreadPoolExecutor(max_workers=min(self.max_workers, max(len(types), 1))) as pool:
            futures = {
                pool.submit(self.create_model_file, t, names): t
                for t in types
            }

            report.registry = self.create_type_registry(names, report.errors)

            for future in as_completed(futures):
                type_def = futures[future]
                try:
                    results[type_def.name] = str(future.result())
                except Exception as exc:
                    logger.error("  - %s not generated: %s", type_def.name, exc)
                    report.failed.append(type_def.name)
                    report.errors.append(f"{type_def.name}: {exc}")

        report.written = [results[n] for n in names if n in results]
        report.failed.sort(key=names.index)

        logger.info(
            "Finished: %d written, %d failed, %d removed",
            len(report.written),
            len(report.failed),
            len(report.removed),
        )
        return report

    def _current_user(self) -> str | None:
        if self.auth is None:
            return None
        try:
            user = self.auth.current_user()
        except Exception as exc:
            logger.warning("Unable to determine the current user: %s", exc)
            return None
        if user:
            logger.info("Authenticated as %s", user)
        else:
            logger.info("Using an unauthenticated connection")
        return user

    # ── Steps ───────────────────────────────────────────────────

    def fetch_overview(self) -> list[TypeDefinition] | None:
        """Fetch the list of content types, or None when that fails."""
        payload = self._do_request(self.client.list_types, "model overview")
        if payload is None:
            return None
        if not isinstance(payload, list):
            logger.error("Unexpected model overview payload: %s", type(payload).__name__)
            return None
        try:
            return [TypeDefinition.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.error("Invalid model overview: %s", e)
            return None

    def clear_models(self, keep: Sequence[str], errors: list[str] | None = None) -> list[str]:
        """Remove every file from the model directory not named in ``keep``.

        The type registry is always kept.  Returns the removed file names.

        Raises:
            ModelSyncError: If the model directory cannot be listed.
        """
        logger.info("Cleaning model directory")
        try:
            entries = sorted(self.model_path.iterdir())
        except OSError as e:
            raise ModelSyncError(f"unable to list {self.model_path}: {e}") from e

        keep_set = set(keep)
        removed: list[str] = []
        for path in entries:
            if not path.is_file():
                continue
            if path.stem == REGISTRY_NAME or path.stem in keep_set:
                continue
            try:
                path.unlink()
            except OSError as e:
                logger.error("  - Unable to remove %s: %s", path.name, e)
                if errors is not None:
                    errors.append(f"remove {path.name}: {e}")
                continue
            logger.info("  - Removed old model: %s", path.stem)
            removed.append(path.name)
        return removed

    def create_model_file(self, type_def: TypeDefinition, all_names: Sequence[str]) -> Path:
        """Fetch, generate and write the model of one content type.

        Raises:
            ModelSyncError: If the definition cannot be fetched or is invalid.
            OSError: If the file cannot be written.
        """
        payload = self._do_request(
            lambda: self.client.get_type(type_def.guid),
            f"model {type_def.name}",
        )
        if payload is None:
            raise ModelSyncError(f"unable to fetch definition {type_def.guid}")
        try:
            info = TypeDefinitionData.model_validate(payload)
        except ValidationError as e:
            raise ModelSyncError(f"invalid definition: {e}") from e
        if info.name != type_def.name:
            raise ModelSyncError(
                f"definition {type_def.guid} describes '{info.name}', expected '{type_def.name}'"
            )

        generated = generate_model_file(info, all_names)
        target = write_generated_file(self.model_path, generated)
        logger.info("  - %s written to %s", interface_name(info.name), target)
        return target

    def create_type_registry(self, all_names: Sequence[str], errors: list[str] | None = None) -> str | None:
        """Write TypeMapper.ts; returns its path, or None if writing failed."""
        generated = generate_type_registry(all_names)
        try:
            target = write_generated_file(self.model_path, generated)
        except OSError as e:
            logger.error("Unable to write type mapper: %s", e)
            if errors is not None:
                errors.append(f"{generated.path}: {e}")
            return None
        logger.info("Written type mapper")
        return str(target)

    def _do_request(self, fetch: Callable[[], Any], what: str) -> Any:
        """Call the client, turning every failure into a logged None."""
        try:
            payload = fetch()
        except Exception as exc:
            logger.error("Error while fetching %s: %s", what, exc)
            return None
        if is_network_error(payload):
            logger.error("Error while fetching %s: %s", what, payload)
            return None
        return payload


def _unique_by_name(types: list[TypeDefinition]) -> list[TypeDefinition]:
    seen: set[str] = set()
    out: list[TypeDefinition] = []
    for t in types:
        if t.name in seen:
            logger.warning("Ignoring duplicate content type '%s' (%s)", t.name, t.guid)
            continue
        seen.add(t.name)
        out.append(t)
    return out
