"""
Engine payload models

Image payloads use PascalCase keys on the wire; fields map to them through
aliases and can also be populated by their Python names.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class EngineModel(BaseModel):
    """Base for models with PascalCase wire keys"""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class ErrorEnvelope(BaseModel):
    """Body of a classified error response"""

    message: str


class ImageSummary(EngineModel):
    """Entry of GET /images/json"""

    id: str
    parent_id: str = ''
    repo_tags: Optional[List[str]] = None
    repo_digests: Optional[List[str]] = None
    created: int = 0
    size: int = 0
    shared_size: int = -1
    containers: int = -1
    labels: Optional[Dict[str, str]] = None

    @property
    def short_id(self) -> str:
        return self.id.split(':', 1)[-1][:12]


class HealthCheck(EngineModel):
    test: List[str] = Field(default_factory=list)
    interval: int = 0
    timeout: int = 0
    retries: int = 0
    start_period: int = 0


class ContainerConfig(EngineModel):
    hostname: str = ''
    domainname: str = ''
    user: str = ''
    attach_stdin: bool = False
    attach_stdout: bool = False
    attach_stderr: bool = False
    tty: bool = False
    open_stdin: bool = False
    stdin_once: bool = False
    env: Optional[List[str]] = None
    cmd: Optional[List[str]] = None
    health_check: Optional[HealthCheck] = Field(default=None, alias='Healthcheck')
    args_escaped: Optional[bool] = None
    image: str = ''
    working_dir: str = ''
    entrypoint: Optional[List[str]] = None
    network_disabled: Optional[bool] = None
    mac_address: Optional[str] = None
    on_build: Optional[List[str]] = None
    labels: Optional[Dict[str, str]] = None
    stop_signal: Optional[str] = None


class ImageDetails(EngineModel):
    """Body of GET /images/{name}/json"""

    id: str
    repo_tags: List[str] = Field(default_factory=list)
    repo_digests: List[str] = Field(default_factory=list)
    parent: str = ''
    comment: str = ''
    created: str = ''
    container: str = ''
    container_config: Optional[ContainerConfig] = None
    config: Optional[ContainerConfig] = None
    docker_version: str = ''
    author: str = ''
    architecture: str = ''
    variant: Optional[str] = None
    os: str = ''
    os_version: Optional[str] = None
    size: int = 0
    virtual_size: Optional[int] = None


class ImageHistory(EngineModel):
    """Entry of GET /images/{name}/history"""

    id: str
    created: int
    created_by: str = ''
    tags: Optional[List[str]] = None
    size: int = 0
    comment: str = ''


class ImageDeletionInfo(EngineModel):
    """Entry of DELETE /images/{name}"""

    untagged: Optional[str] = None
    deleted: Optional[str] = None


class ImageSearchResult(BaseModel):
    """Entry of GET /images/search"""

    name: str
    description: str = ''
    is_official: bool = False
    is_automated: bool = False
    star_count: int = 0
