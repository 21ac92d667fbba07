"""Puppet metadata and usage rights."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class PuppetAllowedUsers(Enum):
    """Who is allowed to use the puppet."""

    ONLY_AUTHOR = "OnlyAuthor"
    ONLY_LICENSEE = "OnlyLicensee"
    EVERYONE = "Everyone"

    def __str__(self) -> str:
        return {
            PuppetAllowedUsers.ONLY_AUTHOR: "only author",
            PuppetAllowedUsers.ONLY_LICENSEE: "only licensee",
            PuppetAllowedUsers.EVERYONE: "Everyone",
        }[self]


class PuppetAllowedRedistribution(Enum):
    """Whether the puppet may be redistributed."""

    PROHIBITED = "Prohibited"
    VIRAL_LICENSE = "ViralLicense"
    COPYLEFT_LICENSE = "CopyleftLicense"

    def __str__(self) -> str:
        return {
            PuppetAllowedRedistribution.PROHIBITED: "prohibited",
            PuppetAllowedRedistribution.VIRAL_LICENSE: "viral license",
            PuppetAllowedRedistribution.COPYLEFT_LICENSE: "copyleft license",
        }[self]


class PuppetAllowedModification(Enum):
    """Whether the puppet may be modified."""

    PROHIBITED = "Prohibited"
    ALLOW_PERSONAL = "AllowPersonal"
    ALLOW_REDISTRIBUTE = "AllowRedistribute"

    def __str__(self) -> str:
        return {
            PuppetAllowedModification.PROHIBITED: "prohibited",
            PuppetAllowedModification.ALLOW_PERSONAL: "allow personal",
            PuppetAllowedModification.ALLOW_REDISTRIBUTE: "allow redistribute",
        }[self]


def _allowed(value: bool) -> str:
    return "allowed" if value else "prohibited"


@dataclass
class PuppetUsageRights:
    """Terms of usage of the puppet."""

    allowed_users: PuppetAllowedUsers = PuppetAllowedUsers.ONLY_AUTHOR
    allow_violence: bool = False
    allow_sexual: bool = False
    allow_commercial: bool = False
    allow_redistribution: PuppetAllowedRedistribution = PuppetAllowedRedistribution.PROHIBITED
    allow_modification: PuppetAllowedModification = PuppetAllowedModification.PROHIBITED
    require_attribution: bool = False

    def __str__(self) -> str:
        attribution = "required" if self.require_attribution else "not required"
        return (
            f"| allowed users:  {self.allowed_users}\n"
            f"| violence:       {_allowed(self.allow_violence)}\n"
            f"| sexual:         {_allowed(self.allow_sexual)}\n"
            f"| commercial:     {_allowed(self.allow_commercial)}\n"
            f"| redistribution: {self.allow_redistribution}\n"
            f"| modification:   {self.allow_modification}\n"
            f"| attribution: {attribution}\n"
        )


def _line(field_name: str, value: Any) -> str:
    if value is None:
        return ""
    return f"{field_name + ':':<17}{value}\n"


@dataclass
class PuppetMeta:
    """Descriptive metadata of a puppet."""

    name: Optional[str] = None
    version: str = ""
    rigger: Optional[str] = None
    artist: Optional[str] = None
    rights: Optional[PuppetUsageRights] = None
    copyright: Optional[str] = None
    license_url: Optional[str] = None
    contact: Optional[str] = None
    reference: Optional[str] = None
    thumbnail_id: Optional[int] = None
    preserve_pixels: bool = False

    def __str__(self) -> str:
        parts = [_line("Name", self.name) if self.name is not None else "(No Name)\n"]
        parts.append(_line("Version", self.version))
        parts.append(_line("Rigger", self.rigger))
        parts.append(_line("Artist", self.artist))
        if self.rights is not None:
            parts.append("Rights:\n")
            parts.append(f"{self.rights}\n")
        parts.append(_line("Copyright", self.copyright))
        parts.append(_line("License URL", self.license_url))
        parts.append(_line("Contact", self.contact))
        parts.append(_line("Reference", self.reference))
        parts.append(_line("Thumbnail ID", self.thumbnail_id))
        parts.append(_line("Preserve pixels", "yes" if self.preserve_pixels else "no"))
        return "".join(parts)