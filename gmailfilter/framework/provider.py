"""Provider contract: names the provider, configures shared data, lists kinds."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from .diagnostics import Diagnostics
from .resource import DataSource, Resource
from .schema import Schema
from .state import State


@dataclass
class ConfigureResponse:
    resource_data: Any = None
    data_source_data: Any = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


class Provider(ABC):

    @abstractmethod
    def metadata(self) -> Tuple[str, str]:
        """Return (type name, version)."""

    def schema(self) -> Schema:
        return Schema()

    @abstractmethod
    def configure(self, config: State, resp: ConfigureResponse):
        ...

    @abstractmethod
    def resources(self) -> List[Callable[[], Resource]]:
        ...

    @abstractmethod
    def data_sources(self) -> List[Callable[[], DataSource]]:
        ...
