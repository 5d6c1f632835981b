from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from ..application.auto_mapping_use_case import (
    AutoMappingDependencies,
    AutoMappingUseCase,
)
from ..config import MapperSettings
from ..domain.services.mapping_store import MappingStore
from .io.term_extraction import TermFileReader
from .logging.console_logger import ConsoleLogger
from .logging.null_logger import NullLogger
from .repositories.json_mapping_repository import JsonMappingRepository
from .repositories.memory_mapping_repository import InMemoryMappingRepository
from .workers.execution_host import ExecutionHost

if TYPE_CHECKING:
    from ..application.ports.repositories import MappingRepositoryPort
    from ..application.ports.services import LoggerPort
    from ..domain.services.matching import SynonymTable


class DependencyContainer:
    """Builds and caches the services the CLI needs from one settings object."""

    def __init__(
        self,
        settings: MapperSettings | None = None,
        verbose: int = 0,
        console: Console | None = None,
        use_null_logger: bool = False,
        in_memory: bool = False,
    ) -> None:
        super().__init__()
        self.settings = settings or MapperSettings()
        self.verbose = verbose
        self.console = console or Console()
        self.use_null_logger = use_null_logger
        self.in_memory = in_memory
        self._logger_instance: LoggerPort | None = None
        self._repository_instance: MappingRepositoryPort | None = None
        self._store_instance: MappingStore | None = None
        self._host_instance: ExecutionHost | None = None
        self._term_reader_instance: TermFileReader | None = None

    def create_logger(self) -> LoggerPort:
        if self._logger_instance is None:
            if self.use_null_logger:
                self._logger_instance = NullLogger()
            else:
                self._logger_instance = ConsoleLogger(
                    console=self.console, verbosity=self.verbose
                )
        return self._logger_instance

    def create_repository(self) -> MappingRepositoryPort:
        if self._repository_instance is None:
            if self.in_memory:
                self._repository_instance = InMemoryMappingRepository()
            else:
                self._repository_instance = JsonMappingRepository(
                    self.settings.store_path
                )
        return self._repository_instance

    def create_store(self) -> MappingStore:
        if self._store_instance is None:
            self._store_instance = MappingStore()
        return self._store_instance

    def create_host(self) -> ExecutionHost:
        if self._host_instance is None:
            self._host_instance = ExecutionHost(
                max_workers=self.settings.max_workers,
                use_processes=self.settings.use_processes,
                progress_every=self.settings.progress_every,
                logger=self.create_logger(),
            )
        return self._host_instance

    def create_term_reader(self) -> TermFileReader:
        if self._term_reader_instance is None:
            self._term_reader_instance = TermFileReader()
        return self._term_reader_instance

    def create_auto_mapping_use_case(
        self, synonyms: SynonymTable | None = None
    ) -> AutoMappingUseCase:
        dependencies = AutoMappingDependencies(
            logger=self.create_logger(),
            store=self.create_store(),
            repository=self.create_repository(),
            host=self.create_host(),
        )
        return AutoMappingUseCase(dependencies, synonyms=synonyms)

    def shutdown(self) -> None:
        if self._host_instance is not None:
            self._host_instance.shutdown()
            self._host_instance = None

    def reset_singletons(self) -> None:
        self.shutdown()
        self._logger_instance = None
        self._repository_instance = None
        self._store_instance = None
        self._term_reader_instance = None

    def override_logger(self, logger: LoggerPort) -> None:
        self._logger_instance = logger

    def override_repository(self, repository: MappingRepositoryPort) -> None:
        self._repository_instance = repository


def create_default_container(
    settings: MapperSettings | None = None, verbose: int = 0
) -> DependencyContainer:
    return DependencyContainer(settings=settings, verbose=verbose)
