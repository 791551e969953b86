"""
Metadata Builders

Typed builders that turn a caller's input mapping into YouTube resource
bodies. Only keys present in the input are written; absent keys leave the
corresponding remote field untouched.

Usage:
    metadata = VideoMetadata.from_mapping({"title": "X", "tags": ["a"]})
    metadata.parts      # ["snippet"]
    metadata.to_body()  # {"snippet": {"title": "X", "tags": ["a"]}}
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from youtube_adapter.constants import PRIVACY_STATUSES

# input key -> (resource part, API field name)
FieldMap = Dict[str, Tuple[str, str]]


@dataclass(frozen=True)
class ResourceMetadata:
    """
    Base builder: holds the present fields grouped by resource part.

    Subclasses declare FIELDS, mapping caller keys to API locations.
    """

    FIELDS: ClassVar[FieldMap] = {}

    values: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None):
        """
        Build from a caller mapping, keeping only recognised keys.

        Raises:
            ValueError: If a recognised key has an invalid value
        """
        values: Dict[str, Dict[str, Any]] = {}
        for key, raw_value in (data or {}).items():
            if key not in cls.FIELDS:
                continue
            part, api_name = cls.FIELDS[key]
            values.setdefault(part, {})[api_name] = _normalize(key, raw_value)
        return cls(values=values)

    @property
    def parts(self) -> List[str]:
        """Resource parts touched by this metadata (the update field mask)"""
        return sorted(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.values

    def get(self, key: str, default: Any = None) -> Any:
        part, api_name = self.FIELDS[key]
        return self.values.get(part, {}).get(api_name, default)

    def to_body(self, resource_id: Optional[str] = None) -> Dict[str, Any]:
        """Request body containing only the present fields"""
        body: Dict[str, Any] = copy.deepcopy(self.values)
        if resource_id is not None:
            body["id"] = resource_id
        return body

    def apply_to(self, resource: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Overlay the present fields onto an existing resource.

        Only the touched parts are returned, so untouched parts are not
        sent back to the server.
        """
        body: Dict[str, Any] = {"id": resource.get("id")}
        for part, fields in self.values.items():
            merged = dict(resource.get(part) or {})
            merged.update(copy.deepcopy(fields))
            body[part] = merged
        return body


@dataclass(frozen=True)
class VideoMetadata(ResourceMetadata):
    FIELDS: ClassVar[FieldMap] = {
        "title": ("snippet", "title"),
        "description": ("snippet", "description"),
        "tags": ("snippet", "tags"),
        "category_id": ("snippet", "categoryId"),
        "default_language": ("snippet", "defaultLanguage"),
        "privacy_status": ("status", "privacyStatus"),
        "publish_at": ("status", "publishAt"),
        "embeddable": ("status", "embeddable"),
    }


@dataclass(frozen=True)
class PlaylistMetadata(ResourceMetadata):
    FIELDS: ClassVar[FieldMap] = {
        "title": ("snippet", "title"),
        "description": ("snippet", "description"),
        "tags": ("snippet", "tags"),
        "default_language": ("snippet", "defaultLanguage"),
        "privacy_status": ("status", "privacyStatus"),
    }


def playlist_item_body(
    playlist_id: str,
    video_id: str,
    position: Optional[int] = None,
) -> Dict[str, Any]:
    """Body for playlistItems.insert"""
    snippet: Dict[str, Any] = {
        "playlistId": playlist_id,
        "resourceId": {
            "kind": "youtube#video",
            "videoId": video_id,
        },
    }
    if position is not None:
        snippet["position"] = position
    return {"snippet": snippet}


def _normalize(key: str, value: Any) -> Any:
    if key == "tags":
        if isinstance(value, str):
            value = value.split(",")
        return [str(tag).strip() for tag in value if str(tag).strip()]

    if key == "privacy_status":
        if value not in PRIVACY_STATUSES:
            raise ValueError(
                f"Invalid privacy status: {value}. Expected one of {PRIVACY_STATUSES}"
            )
        return value

    if key == "publish_at" and isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.strftime("%Y-%m-%dT%H:%M:%S.000Z")

    if key == "embeddable":
        return bool(value)

    return value
