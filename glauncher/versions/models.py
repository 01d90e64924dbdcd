"""Data models for Minecraft versions."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Artifact(BaseModel):
    path: Optional[str] = None
    sha1: Optional[str] = None
    size: Optional[int] = None
    url: Optional[str] = None


class VersionDownloads(BaseModel):
    client: Optional[Artifact] = None
    server: Optional[Artifact] = None


class LibraryExtractor(BaseModel):
    exclude: List[str] = Field(default_factory=list)


class LibraryDownloads(BaseModel):
    artifact: Optional[Artifact] = None
    classifiers: Optional[Dict[str, Artifact]] = None


class RuleOs(BaseModel):
    name: Optional[str] = None
    version: Optional[str] = None
    arch: Optional[str] = None


class Rule(BaseModel):
    action: str
    os: Optional[RuleOs] = None

    def applies_to(self, os_name: str) -> bool:
        """A rule applies when it has no OS constraint or the constraint names ``os_name``."""
        return self.os is None or self.os.name is None or self.os.name == os_name


class Library(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None
    downloads: Optional[LibraryDownloads] = None
    rules: Optional[List[Rule]] = None
    extract: Optional[LibraryExtractor] = None
    natives: Optional[Dict[str, str]] = None

    @property
    def artifact(self) -> Optional[Artifact]:
        """The main jar of this library, if it has one.

        Libraries written by mod loaders often carry only a maven coordinate
        and a repository url; the artifact path is derived from those.
        """
        if self.downloads and self.downloads.artifact:
            return self.downloads.artifact
        if self.natives or not self.name or not self.url:
            return None
        path = maven_path(self.name)
        if path is None:
            return None
        return Artifact(path=path, url=f"{self.url.rstrip('/')}/{path}")

    def classifier(self, key: str) -> Optional[Artifact]:
        if not self.downloads or not self.downloads.classifiers:
            return None
        return self.downloads.classifiers.get(key)


class ConditionalArgument(BaseModel):
    rules: Optional[List[Rule]] = None
    value: Union[str, List[str]]

    @property
    def values(self) -> List[str]:
        return [self.value] if isinstance(self.value, str) else list(self.value)


Argument = Union[str, ConditionalArgument]


class Arguments(BaseModel):
    game: List[Argument] = Field(default_factory=list)
    jvm: List[Argument] = Field(default_factory=list)


class AssetIndexRef(BaseModel):
    id: str
    url: Optional[str] = None
    sha1: Optional[str] = None
    size: Optional[int] = None
    totalSize: Optional[int] = None


class AssetObject(BaseModel):
    hash: str
    size: int = 0

    @property
    def path(self) -> str:
        """Content-addressed location relative to ``assets/objects``."""
        return f"{self.hash[:2]}/{self.hash}"


class AssetIndex(BaseModel):
    objects: Dict[str, AssetObject] = Field(default_factory=dict)


class VersionInfo(BaseModel):
    """Entry of the remote version manifest."""
    id: str
    type: str
    url: str
    time: Optional[datetime] = None
    releaseTime: datetime
    sha1: Optional[str] = None
    complianceLevel: int = 0


class VersionManifest(BaseModel):
    latest: Dict[str, str] = Field(default_factory=dict)
    versions: List[VersionInfo] = Field(default_factory=list)

    def find(self, version_id: str) -> Optional[VersionInfo]:
        for version in self.versions:
            if version.id == version_id:
                return version
        return None


class VersionSummary(BaseModel):
    """Row of the version listing: remote or locally installed."""
    id: str
    type: str
    releaseTime: datetime = EPOCH
    url: Optional[str] = None

    @property
    def sort_key(self) -> datetime:
        if self.releaseTime.tzinfo is None:
            return self.releaseTime.replace(tzinfo=timezone.utc)
        return self.releaseTime


class VersionDescriptor(BaseModel):
    """Parsed version.json. After resolution ``inheritsFrom`` is always None."""
    id: str
    type: Optional[str] = None
    time: Optional[datetime] = None
    releaseTime: Optional[datetime] = None
    inheritsFrom: Optional[str] = None
    mainClass: Optional[str] = None
    assetIndex: Optional[AssetIndexRef] = None
    assets: Optional[str] = None
    downloads: Optional[VersionDownloads] = None
    libraries: List[Library] = Field(default_factory=list)
    arguments: Optional[Arguments] = None
    minecraftArguments: Optional[str] = None
    jar: Optional[str] = None

    @property
    def jar_id(self) -> str:
        """Id of the version whose client jar this version runs."""
        return self.jar or self.id


class LaunchPlan(BaseModel):
    executable: str
    args: List[str]
    classpath: str
    natives_dir: str
    cwd: str

    @property
    def command(self) -> List[str]:
        return [self.executable, *self.args]


def maven_path(name: str) -> Optional[str]:
    """``group:artifact:version[:classifier][@ext]`` to its repository-relative path."""
    ext = "jar"
    if "@" in name:
        name, ext = name.split("@", 1)
    parts = name.split(":")
    if len(parts) < 3:
        return None
    group, artifact, version = parts[0], parts[1], parts[2]
    classifier = f"-{parts[3]}" if len(parts) > 3 else ""
    return f"{group.replace('.', '/')}/{artifact}/{version}/{artifact}-{version}{classifier}.{ext}"
