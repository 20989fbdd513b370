"""
Grouping of related files and reduction of each group to one type and date.

A group is every file sharing the part of its name before the first dot,
e.g. DSC0001.jpg, DSC0001.dng and DSC0001.edited.jpg. The group moves as a
unit, so the primary file decides where its sidecars go.
"""
from datetime import timezone
from typing import Dict, Iterable, List

from ..exceptions import EmptyGroupError
from ..models import CoarseType, FileDescriptor, GroupVerdict

# Any of these makes a group a media group; the first one found wins
MEDIA_TYPES = (CoarseType.IMAGE, CoarseType.AUDIO, CoarseType.VIDEO)


def group_descriptors(descriptors: Iterable[FileDescriptor]) -> Dict[str, List[FileDescriptor]]:
    """Keys come out in order of first appearance, members in input order."""
    groups: Dict[str, List[FileDescriptor]] = {}
    for descriptor in descriptors:
        groups.setdefault(descriptor.group_key, []).append(descriptor)
    return groups


def resolve_type(members: List[FileDescriptor]) -> CoarseType:
    for member in members:
        if member.coarse_type in MEDIA_TYPES:
            return member.coarse_type
    return CoarseType.OTHER


def resolve_date(members: List[FileDescriptor]):
    # Earliest wins: an edited sidecar is always younger than its original
    earliest = min(member.effective_at for member in members)
    try:
        return earliest.astimezone(timezone.utc).date()
    except OverflowError:
        # Past the last representable UTC instant: keep the wall-clock date
        return earliest.date()


def reduce_group(members: List[FileDescriptor]) -> GroupVerdict:
    if not members:
        raise EmptyGroupError("Cannot reduce an empty group")
    return GroupVerdict(
        resolved_type=resolve_type(members),
        resolved_date=resolve_date(members),
    )


def reduce_groups(groups: Dict[str, List[FileDescriptor]]) -> Dict[str, GroupVerdict]:
    return {key: reduce_group(members) for key, members in groups.items()}
