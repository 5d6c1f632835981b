"""Auto-mapping use case.

Coordinates the mapping store, the persistence adapter and the execution host:

1. Loads mappings and learned corrections from persistence
2. Validates the matching config and dispatches the run to the host
3. Drops responses that belong to a superseded request
4. Applies accepted suggestions to the store and saves them
5. Notifies subscribers whenever the mapping set changes

The store is only ever touched from the caller's thread; the worker receives
immutable copies of the mappings and corrections it needs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..constants import WorkerActions
from ..domain.entities.auto_mapping_config import AutoMappingConfig
from ..domain.entities.mapping import SuggestionRun
from ..domain.exceptions import (
    AutoMappingError,
    InvalidConfigError,
    MappingStage,
    PersistenceError,
)
from ..domain.services.matching import SPECIALTY_SYNONYMS, score
from .models import (
    AcceptResult,
    AutoMapPayload,
    AutoMapResult,
    ChangeReason,
    MappingsChangedEvent,
)

if TYPE_CHECKING:
    from ..domain.entities.mapping import MappingSuggestion, StandardizedMapping
    from ..domain.entities.terms import SourceTerm, TermKey
    from ..domain.services.mapping_store import MappingStore, StoreSnapshot
    from ..domain.services.matching import SynonymTable
    from .models import ProgressMessage, WorkerResponse
    from .ports.repositories import MappingRepositoryPort
    from .ports.services import ExecutionHostPort, LoggerPort, PendingRequestLike

type ChangeListener = Callable[[MappingsChangedEvent], None]
type ProgressListener = Callable[[ProgressMessage], None]


@dataclass(slots=True)
class AutoMappingDependencies:
    logger: LoggerPort
    store: MappingStore
    repository: MappingRepositoryPort
    host: ExecutionHostPort


class AutoMappingUseCase:
    """Runs auto-mapping in the background and applies accepted results.

    Example:
        >>> use_case = AutoMappingUseCase(dependencies)
        >>> use_case.load()
        >>> result = use_case.run_auto_map(terms, AutoMappingConfig())
        >>> if result is not None:
        ...     use_case.accept_suggestions(result.suggestions)
    """

    def __init__(
        self,
        dependencies: AutoMappingDependencies,
        *,
        synonyms: SynonymTable | None = None,
    ) -> None:
        """Initialize the use case with injected dependencies.

        Args:
            dependencies: Store, persistence adapter, host and logger
            synonyms: Synonym table sent with every run; ``None`` lets the
                worker pick a table per term kind
        """
        super().__init__()
        self.logger = dependencies.logger
        self.store = dependencies.store
        self._repository = dependencies.repository
        self._host = dependencies.host
        self._synonyms = synonyms
        self._listeners: list[ChangeListener] = []
        self._pending_counts: dict[int, int] = {}

    # ------------------------------------------------------------------
    # Change notifications

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, reason: ChangeReason, mapping_ids: Iterable[str]) -> None:
        event = MappingsChangedEvent(
            reason=reason,
            mapping_ids=tuple(mapping_ids),
            version=self.store.version,
        )
        self.logger.log_mapping_change(event.reason, event.mapping_ids)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                self.logger.error(f"Mappings-changed listener failed: {exc}")

    # ------------------------------------------------------------------
    # Loading

    def load(self) -> None:
        mappings = self._repository.load_mappings()
        corrections = self._repository.load_learned_corrections()
        self.store.load(mappings, corrections)
        self.logger.verbose(
            f"Loaded {len(mappings)} mappings and "
            f"{len(corrections)} learned corrections"
        )
        self._notify(ChangeReason.LOADED, (m.id for m in self.store.mappings))

    def unmapped_terms(self, all_observed: Iterable[SourceTerm]) -> list[SourceTerm]:
        return self.store.unmapped_terms(all_observed)

    # ------------------------------------------------------------------
    # Matching

    def start_auto_map(
        self,
        unmapped_terms: Sequence[SourceTerm],
        config: AutoMappingConfig,
        *,
        on_progress: ProgressListener | None = None,
    ) -> PendingRequestLike:
        """Dispatch a run and return without waiting.

        Raises:
            InvalidConfigError: If ``config`` is not a valid config; nothing
                is sent to the worker in that case
        """
        payload = self._build_payload(unmapped_terms, config)
        pending = self._host.submit(
            WorkerActions.AUTO_MAP, payload, config, on_progress=on_progress
        )
        self._record_start(pending.request_id, payload, config)
        return pending

    def run_auto_map(
        self,
        unmapped_terms: Sequence[SourceTerm],
        config: AutoMappingConfig,
        *,
        on_progress: ProgressListener | None = None,
        timeout: float | None = None,
    ) -> AutoMapResult | None:
        pending = self.start_auto_map(
            unmapped_terms, config, on_progress=on_progress
        )
        try:
            response = pending.result(timeout)
        except TimeoutError:
            self._pending_counts.pop(pending.request_id, None)
            raise
        return self.collect(response)

    async def run_auto_map_async(
        self,
        unmapped_terms: Sequence[SourceTerm],
        config: AutoMappingConfig,
        *,
        on_progress: ProgressListener | None = None,
    ) -> AutoMapResult | None:
        """Awaitable run; progress callbacks run on the awaiting loop."""
        loop = asyncio.get_running_loop()
        forward: ProgressListener | None = None
        if on_progress is not None:
            handler = on_progress

            def forward(message: ProgressMessage) -> None:
                loop.call_soon_threadsafe(handler, message)

        pending = self.start_auto_map(unmapped_terms, config, on_progress=forward)
        response = await asyncio.to_thread(pending.result)
        return self.collect(response)

    def collect(self, response: WorkerResponse) -> AutoMapResult | None:
        """Turn a worker response into a result.

        Returns None when a newer request has been issued since this one.

        Raises:
            AutoMappingError: With ``stage=SCORING`` if the worker failed
        """
        term_count = self._pending_counts.pop(response.request_id, 0)
        latest = self._host.latest_request_id
        if response.request_id != latest:
            self.logger.log_stale_response(response.request_id, latest)
            return None
        if not response.success:
            self.logger.error(
                f"Auto-map request {response.request_id} failed: {response.error}"
            )
            raise AutoMappingError(
                response.error or "Auto-mapping failed",
                stage=MappingStage.SCORING,
                request_id=response.request_id,
            )
        run = response.data
        if not isinstance(run, SuggestionRun):
            raise AutoMappingError(
                f"Unexpected worker result: {type(run).__name__}",
                stage=MappingStage.SCORING,
                request_id=response.request_id,
            )
        self.logger.log_run_complete(
            response.request_id, len(run.suggestions), len(run.unmatched)
        )
        if term_count and not run.suggestions:
            self.logger.verbose("No suggestions reached the confidence threshold")
        return AutoMapResult(
            request_id=response.request_id,
            suggestions=list(run.suggestions),
            unmatched=list(run.unmatched),
        )

    def calculate_confidence(
        self,
        term: str,
        mapping: StandardizedMapping | str,
        config: AutoMappingConfig,
    ) -> float:
        _validate_config(config)
        synonyms = self._synonyms if self._synonyms is not None else SPECIALTY_SYNONYMS
        return score(term, mapping, config, synonyms)

    def _build_payload(
        self, unmapped_terms: Sequence[SourceTerm], config: AutoMappingConfig
    ) -> AutoMapPayload:
        _validate_config(config)
        return AutoMapPayload(
            unmapped_terms=tuple(unmapped_terms),
            existing_mappings=self.store.mappings,
            learned_corrections=dict(self.store.learned_corrections),
            synonyms=self._synonyms,
        )

    def _record_start(
        self, request_id: int, payload: AutoMapPayload, config: AutoMappingConfig
    ) -> None:
        # Only the newest request can still produce a result.
        self._pending_counts.clear()
        self._pending_counts[request_id] = len(payload.unmapped_terms)
        self.logger.log_run_start(
            request_id,
            len(payload.unmapped_terms),
            len(payload.existing_mappings),
            config.confidence_threshold,
        )

    # ------------------------------------------------------------------
    # Store changes

    def accept_suggestions(
        self,
        suggestions: Iterable[MappingSuggestion],
        *,
        learn: bool = False,
    ) -> AcceptResult:
        """Apply accepted suggestions to the store and persist each one.

        A suggestion extends the mapping that already carries its name, or
        creates a new mapping. Members that are already mapped are skipped.
        With ``learn`` set, members whose text differs from the mapping name
        are also recorded as learned corrections.

        Raises:
            AutoMappingError: With ``stage=PERSISTENCE`` if a save fails. The
                failing step is rolled back; mappings created before it stay
                and are listed in ``created_mapping_ids``.
        """
        result = AcceptResult()
        for suggestion in suggestions:
            members = [m for m in suggestion.members if not self.store.is_mapped(m.key)]
            if not members:
                continue
            existing = self.store.find_by_name(suggestion.standardized_name)

            snapshot = self.store.snapshot()
            if existing is None:
                mapping = self.store.create_mapping(
                    suggestion.standardized_name, members
                )
                step_ids = result.created_mapping_ids
            else:
                mapping = self.store.add_members(existing.id, members)
                step_ids = result.extended_mapping_ids
            if learn:
                for member in members:
                    if member.text != mapping.standardized_name:
                        self.store.record_learned_correction(
                            member.text, mapping.standardized_name
                        )

            try:
                self._repository.save_mappings(self.store.mappings)
                if learn:
                    self._repository.save_learned_corrections(
                        self.store.learned_correction_records()
                    )
            except PersistenceError as exc:
                self._rollback(snapshot)
                self.logger.error(f"Failed to save accepted suggestions: {exc}")
                raise AutoMappingError(
                    str(exc),
                    stage=MappingStage.PERSISTENCE,
                    created_mapping_ids=result.created_mapping_ids,
                ) from exc
            step_ids.append(mapping.id)

        if result.created_mapping_ids:
            self._notify(ChangeReason.CREATED, result.created_mapping_ids)
        if result.extended_mapping_ids:
            self._notify(ChangeReason.EXTENDED, result.extended_mapping_ids)
        return result

    def create_mapping(
        self, name: str, members: Iterable[SourceTerm] = ()
    ) -> StandardizedMapping:
        snapshot = self.store.snapshot()
        mapping = self.store.create_mapping(name, members)
        self._save_mappings(snapshot)
        self._notify(ChangeReason.CREATED, (mapping.id,))
        return mapping

    def delete_mapping(self, mapping_id: str) -> StandardizedMapping:
        """Delete a mapping; its members return to the unmapped pool."""
        snapshot = self.store.snapshot()
        mapping = self.store.delete_mapping(mapping_id)
        self._save_mappings(snapshot)
        self._notify(ChangeReason.DELETED, (mapping.id,))
        return mapping

    def reassign_term(
        self, key: TermKey, target_mapping_id: str, *, learn: bool = True
    ) -> StandardizedMapping:
        """Move a term to another mapping, overriding where it was mapped.

        The override is remembered as a learned correction unless ``learn``
        is False.
        """
        target = self.store.get_mapping(target_mapping_id)
        current = self.store.mapping_for_term(key)
        if current is not None and current.id == target.id:
            return target
        if current is None:
            raise KeyError(f"Term is not mapped: {key!r}")
        term = _find_member(current, key)
        if term is None:
            raise KeyError(f"Term is not mapped: {key!r}")

        snapshot = self.store.snapshot()
        self.store.remove_members(current.id, (key,))
        updated = self.store.add_members(target.id, (term,))
        if learn:
            self.store.record_learned_correction(term.text, target.standardized_name)
        self._save_mappings(snapshot, corrections=learn)
        self._notify(ChangeReason.REASSIGNED, (current.id, target.id))
        return updated

    def record_learned_correction(
        self, original_text: str, corrected_name: str
    ) -> None:
        snapshot = self.store.snapshot()
        self.store.record_learned_correction(original_text, corrected_name)
        self._save_corrections(snapshot)
        self._notify(ChangeReason.CORRECTIONS, ())

    def remove_learned_correction(self, original_text: str) -> bool:
        snapshot = self.store.snapshot()
        if not self.store.remove_learned_correction(original_text):
            return False
        self._save_corrections(snapshot)
        self._notify(ChangeReason.CORRECTIONS, ())
        return True

    def reset(self) -> None:
        """Drop every mapping and learned correction, in memory and on disk.

        If either save fails the previous state is restored and saved back.
        """
        snapshot = self.store.snapshot()
        removed = [m.id for m in snapshot.mappings]
        self.store.clear_all()
        try:
            self._repository.save_mappings(())
            self._repository.save_learned_corrections(())
        except PersistenceError:
            self._rollback(snapshot)
            self._repository.save_mappings(snapshot.mappings)
            self._repository.save_learned_corrections(snapshot.corrections)
            raise
        self._notify(ChangeReason.CLEARED, removed)

    def _save_mappings(
        self, snapshot: StoreSnapshot, *, corrections: bool = False
    ) -> None:
        try:
            self._repository.save_mappings(self.store.mappings)
            if corrections:
                self._repository.save_learned_corrections(
                    self.store.learned_correction_records()
                )
        except PersistenceError:
            self._rollback(snapshot)
            raise

    def _save_corrections(self, snapshot: StoreSnapshot) -> None:
        try:
            self._repository.save_learned_corrections(
                self.store.learned_correction_records()
            )
        except PersistenceError:
            self._rollback(snapshot)
            raise

    def _rollback(self, snapshot: StoreSnapshot) -> None:
        self.store.restore(snapshot)
        self.logger.warning("Store change rolled back after a failed save")


def _validate_config(config: object) -> None:
    if not isinstance(config, AutoMappingConfig):
        raise InvalidConfigError(
            f"config must be an AutoMappingConfig, got {type(config).__name__}"
        )


def _find_member(mapping: StandardizedMapping, key: TermKey) -> SourceTerm | None:
    for term in mapping.source_terms:
        if term.key == key:
            return term
    return None
