from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel


class ServiceType(StrEnum):
    VCL = "vcl"
    COMPUTE = "wasm"


@dataclass(frozen=True)
class ServiceMetadata:
    service_type: ServiceType


class ServiceVersion(BaseModel):
    number: int
    active: bool = False
    locked: bool = False
    service_id: str | None = None


class ServiceDetail(BaseModel):
    id: str
    name: str | None = None
    type: ServiceType = ServiceType.VCL
    active_version: ServiceVersion | None = None
    version: ServiceVersion | None = None
    versions: list[ServiceVersion] = []

    @property
    def latest_version_number(self) -> int | None:
        numbers = [version.number for version in self.versions]
        if self.version is not None:
            numbers.append(self.version.number)
        return max(numbers) if numbers else None

    @property
    def base_version_number(self) -> int | None:
        """The version to read from and clone: the active one, or the latest when none is active"""
        if self.active_version is not None:
            return self.active_version.number
        return self.latest_version_number
