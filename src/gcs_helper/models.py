"""Pydantic models for the clip manifest and its JSON wire form."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

CLIP_TYPE_SOURCE = "source"


class StorageLocator(BaseModel):
    """A clip resource that names an object in a bucket (eligible for signing)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["storage"] = "storage"
    bucket: str
    key: str

    @property
    def path(self) -> str:
        return f"/{self.bucket}/{self.key}"


class OpaqueResource(BaseModel):
    """A clip resource passed through verbatim (injected extras, signed URLs)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["opaque"] = "opaque"
    value: str

    @property
    def path(self) -> str:
        return self.value


Resource = Annotated[Union[StorageLocator, OpaqueResource], Field(discriminator="kind")]


class Clip(BaseModel):
    """Leaf unit of a manifest."""

    model_config = ConfigDict(frozen=True)

    type: str = CLIP_TYPE_SOURCE
    resource: Resource

    @property
    def path(self) -> str:
        return self.resource.path


class Sequence(BaseModel):
    """One contiguous source: a matched object or an injected resource."""

    model_config = ConfigDict(frozen=True)

    clips: tuple[Clip, ...] = ()

    @classmethod
    def single(cls, resource: StorageLocator | OpaqueResource) -> "Sequence":
        return cls(clips=(Clip(resource=resource),))


class Manifest(BaseModel):
    """Full playlist for one request. Built fresh per request."""

    model_config = ConfigDict(frozen=True)

    sequences: tuple[Sequence, ...] = ()

    def extended(self, sequences: "tuple[Sequence, ...] | list[Sequence]") -> "Manifest":
        """Return a new manifest with sequences appended."""
        return Manifest(sequences=self.sequences + tuple(sequences))

    def to_wire(self) -> "ManifestOut":
        return ManifestOut(
            sequences=[
                SequenceOut(clips=[ClipOut(type=c.type, path=c.path) for c in seq.clips])
                for seq in self.sequences
            ]
        )


# --- JSON response DTOs ---

class ClipOut(BaseModel):
    type: str
    path: str


class SequenceOut(BaseModel):
    clips: list[ClipOut]


class ManifestOut(BaseModel):
    """Response body: {"sequences": [{"clips": [{"type", "path"}]}]}."""

    sequences: list[SequenceOut] = Field(default_factory=list)
