"""
Transaction Metadata Utilities

Structural validation of transaction metadata trees and parsing of the two
NFT metadata conventions found on chain:
- CIP-25: NFT metadata under label 721
- CIP-68: datum-based metadata (reference NFT labels 100 / 500)

Reference:
- CIP-25: https://cips.cardano.org/cip/CIP-0025
- CIP-68: https://cips.cardano.org/cip/CIP-0068
- Cardano Metadata: https://developers.cardano.org/docs/transaction-metadata/
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Union

import pycardano as pc

from .config import EngineSettings, get_settings
from .enums import MetadataStandard


logger = logging.getLogger(__name__)

CIP25_LABEL = "721"
CIP68_LABELS = ("100", "500")

_LABEL_PATTERN = re.compile(r"[0-9]+")


# ============================================================================
# Metadata tree nodes
# ============================================================================


@dataclass(frozen=True)
class MetadataInt:
    value: int


@dataclass(frozen=True)
class MetadataBytes:
    value: bytes


@dataclass(frozen=True)
class MetadataText:
    value: str


@dataclass(frozen=True)
class MetadataList:
    items: tuple["MetadataNode", ...]


@dataclass(frozen=True)
class MetadataMap:
    entries: tuple[tuple[Any, "MetadataNode"], ...]


@dataclass(frozen=True)
class MetadataOpaque:
    """A value with no metadata encoding (floats, booleans, None, objects)"""

    value: Any


MetadataNode = Union[MetadataInt, MetadataBytes, MetadataText, MetadataList, MetadataMap, MetadataOpaque]


def to_metadata_node(value: Any) -> MetadataNode:
    """
    Classify a decoded metadata value into a node

    Lists and tuples become ``MetadataList``, mappings become ``MetadataMap``.
    Anything without an on-chain encoding is wrapped in ``MetadataOpaque``
    instead of being coerced.
    """
    if isinstance(value, bool):
        return MetadataOpaque(value)
    if isinstance(value, int):
        return MetadataInt(value)
    if isinstance(value, str):
        return MetadataText(value)
    if isinstance(value, (bytes, bytearray)):
        return MetadataBytes(bytes(value))
    if isinstance(value, (list, tuple)):
        return MetadataList(tuple(to_metadata_node(item) for item in value))
    if isinstance(value, Mapping):
        return MetadataMap(tuple((key, to_metadata_node(item)) for key, item in value.items()))
    return MetadataOpaque(value)


# ============================================================================
# Structural validation
# ============================================================================


class MetadataValidationResult(NamedTuple):
    valid: bool
    errors: list[str]


def _validate_node(node: MetadataNode, path: str, settings: EngineSettings, errors: list[str]) -> None:
    max_bytes = settings.metadata_max_string_bytes

    if isinstance(node, MetadataText):
        if len(node.value.encode("utf-8")) > max_bytes:
            errors.append(f"{path}: String too long (max {max_bytes} bytes)")
    elif isinstance(node, MetadataBytes):
        if len(node.value) > max_bytes:
            errors.append(f"{path}: Bytes too long (max {max_bytes} bytes)")
    elif isinstance(node, MetadataList):
        for index, item in enumerate(node.items):
            _validate_node(item, f"{path}[{index}]", settings, errors)
    elif isinstance(node, MetadataMap):
        for key, item in node.entries:
            _validate_node(item, f"{path}.{key}", settings, errors)
    elif isinstance(node, MetadataOpaque):
        if isinstance(node.value, float):
            errors.append(f"{path}: Numbers must be integers")
        else:
            errors.append(f"{path}: Unsupported value type {type(node.value).__name__}")


def validate_metadata(metadata: Mapping[Any, Any], settings: Optional[EngineSettings] = None) -> MetadataValidationResult:
    """
    Validate a transaction metadata tree

    Every violation in the tree is reported; validation never stops at the
    first problem and never raises. Error messages carry the path of the
    offending value, e.g. ``metadata[674].msg[2]``.

    Args:
        metadata: Mapping of label (decimal string or int) to metadata value

    Returns:
        MetadataValidationResult(valid, errors)

    Example:
        >>> validate_metadata({"674": {"msg": ["Hello"]}})
        MetadataValidationResult(valid=True, errors=[])
    """
    settings = settings or get_settings()
    errors: list[str] = []

    for key, value in metadata.items():
        label = str(key)
        if isinstance(key, bool) or not _LABEL_PATTERN.fullmatch(label):
            errors.append(f'Metadata key "{label}" must be an integer')
        elif int(label) > settings.metadata_max_label:
            errors.append(f'Metadata key "{label}" out of valid range')

        _validate_node(to_metadata_node(value), f"metadata[{label}]", settings, errors)

    return MetadataValidationResult(valid=not errors, errors=errors)


def convert_metadata_keys(metadata: Any) -> Any:
    """
    Convert decimal string keys to integers, recursively

    Example:
        >>> convert_metadata_keys({"674": {"msg": ["Hello"]}})
        {674: {'msg': ['Hello']}}
    """
    if isinstance(metadata, Mapping):
        return {
            (int(k) if isinstance(k, str) and k.isdigit() else k): convert_metadata_keys(v)
            for k, v in metadata.items()
        }
    if isinstance(metadata, list):
        return [convert_metadata_keys(item) for item in metadata]
    return metadata


def to_auxiliary_data(metadata: Mapping[Any, Any]) -> pc.AuxiliaryData:
    """
    Wrap a metadata tree in PyCardano auxiliary data

    Raises:
        pycardano.InvalidArgumentException: If PyCardano rejects the tree
    """
    metadata_obj = pc.Metadata(convert_metadata_keys(metadata))
    return pc.AuxiliaryData(pc.AlonzoMetadata(metadata=metadata_obj))


def validate_metadata_size(metadata: Mapping[Any, Any], settings: Optional[EngineSettings] = None) -> tuple[bool, str]:
    """
    Validate that serialized metadata fits in a transaction

    Args:
        metadata: Metadata tree to check

    Returns:
        Tuple of (is_valid, error_message)
    """
    settings = settings or get_settings()
    if not metadata:
        return True, ""

    try:
        cbor_size = len(to_auxiliary_data(metadata).to_cbor())
    except Exception as e:
        return False, f"Metadata validation error: {str(e)}"

    if cbor_size > settings.metadata_max_size:
        return False, f"Metadata size ({cbor_size} bytes) exceeds maximum ({settings.metadata_max_size} bytes)"

    return True, ""


# ============================================================================
# CIP-25 / CIP-68 parsing
# ============================================================================


def _label_value(metadata: Mapping[Any, Any], label: str) -> Any:
    if label in metadata:
        return metadata[label]
    return metadata.get(int(label))


def parse_cip25_metadata(metadata: Mapping[Any, Any]) -> dict[str, Any]:
    """
    Flatten CIP-25 metadata into one record per asset

    Each record holds ``policyId`` and ``assetName`` followed by the asset's
    own metadata fields. The reserved ``version`` key is reported at the top
    level.

    Args:
        metadata: Label mapping holding label 721

    Returns:
        ``{"standard": "CIP-25", "assets": [...]}``, or ``{}`` when label 721
        is absent
    """
    cip25_data = _label_value(metadata, CIP25_LABEL)
    if not isinstance(cip25_data, Mapping):
        return {}

    result: dict[str, Any] = {"standard": MetadataStandard.CIP25.value, "assets": []}

    for policy_id, policy_assets in cip25_data.items():
        if policy_id == "version":
            result["version"] = policy_assets
            continue

        if not isinstance(policy_assets, Mapping):
            logger.warning(f"CIP-25 policy {policy_id} is not a mapping, skipping")
            continue

        for asset_name, asset_metadata in policy_assets.items():
            fields = asset_metadata if isinstance(asset_metadata, Mapping) else {}
            result["assets"].append({"policyId": policy_id, "assetName": asset_name, **fields})

    return result


def _unwrap_int(value: Any) -> Any:
    # Detailed-schema datums encode integers as {"int": n}
    if isinstance(value, Mapping) and set(value) == {"int"}:
        return value["int"]
    return value


def parse_cip68_metadata(datum: Mapping[str, Any]) -> dict[str, Any]:
    """
    Parse a CIP-68 datum

    The datum is a constructor with positional ``fields``: metadata body,
    version and extra data. When ``fields`` is missing the ``map`` node, or
    the datum itself, is taken as the metadata body.

    Returns:
        ``{"standard": "CIP-68", "metadata": ..., "version": ..., "extra": ...}``
    """
    fields = datum.get("fields")
    if not isinstance(fields, list):
        fields = []

    if fields:
        body = fields[0]
    elif datum.get("map") is not None:
        body = datum["map"]
    else:
        body = datum

    return {
        "standard": MetadataStandard.CIP68.value,
        "metadata": body,
        "version": _unwrap_int(fields[1]) if len(fields) > 1 else 1,
        "extra": fields[2] if len(fields) > 2 else None,
    }


@dataclass(frozen=True)
class MetadataNotFound:
    """No known metadata convention was present"""

    labels: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"No metadata found for labels {', '.join(self.labels)}"


def find_metadata_label(entries: list[Mapping[str, Any]], *labels: str) -> Optional[Mapping[str, Any]]:
    """
    Find the first Blockfrost metadata entry with one of the given labels

    Args:
        entries: Items of ``/txs/{hash}/metadata`` (``label``, ``json_metadata``)
        labels: Labels to look for, as decimal strings

    Returns:
        The matching entry or None
    """
    for entry in entries:
        if str(entry.get("label")) in labels:
            return entry
    return None


def parse_transaction_metadata(
    metadata: Union[Mapping[Any, Any], list[Mapping[str, Any]]],
) -> Union[dict[str, Any], MetadataNotFound]:
    """
    Parse whichever NFT metadata convention a transaction carries

    CIP-25 (label 721) wins over CIP-68 (labels 100 / 500).

    Args:
        metadata: Label mapping, or Blockfrost ``/txs/{hash}/metadata`` items

    Returns:
        Parsed record, or MetadataNotFound when neither convention is present
    """
    if isinstance(metadata, Mapping):
        tree = {str(label): value for label, value in metadata.items()}
    else:
        tree = {str(entry.get("label")): entry.get("json_metadata") for entry in metadata}

    if isinstance(tree.get(CIP25_LABEL), Mapping):
        return parse_cip25_metadata(tree)

    for label in CIP68_LABELS:
        datum = tree.get(label)
        if isinstance(datum, Mapping):
            return parse_cip68_metadata(datum)

    return MetadataNotFound(labels=(CIP25_LABEL, *CIP68_LABELS))
