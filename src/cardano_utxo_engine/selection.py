"""
Coin Selection

Strategies for choosing which UTXOs fund a payment. Both strategies return a
``SelectionResult`` whose total lovelace and required asset totals meet the
request whenever the candidates allow it. Neither raises when funds run
short: the result is returned under-funded and the caller decides.

Candidates may be ``UnspentOutput`` instances or decoded Blockfrost UTXO
records; inputs are never mutated.
"""

import logging
import random
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Sequence, Union

from .amounts import QuantityLike, parse_quantity
from .config import EngineSettings, get_settings
from .enums import SelectionAlgorithm
from .exceptions import UnsupportedAlgorithmError
from .models import LOVELACE_UNIT, AssetRequirement, SelectionResult, UnspentOutput


logger = logging.getLogger(__name__)

UtxoLike = Union[UnspentOutput, Mapping[str, Any]]
RequirementLike = Union[AssetRequirement, Mapping[str, Any], tuple[str, QuantityLike]]


def _coerce_utxos(utxos: Iterable[UtxoLike]) -> list[UnspentOutput]:
    return [utxo if isinstance(utxo, UnspentOutput) else UnspentOutput.from_blockfrost(utxo) for utxo in utxos]


def _coerce_requirements(required_assets: Optional[Iterable[RequirementLike]]) -> tuple[AssetRequirement, ...]:
    requirements = []
    for requirement in required_assets or ():
        if isinstance(requirement, AssetRequirement):
            requirements.append(requirement)
        elif isinstance(requirement, Mapping):
            requirements.append(AssetRequirement.model_validate(requirement))
        else:
            unit, quantity = requirement
            requirements.append(AssetRequirement(unit=unit, quantity=quantity))
    return tuple(requirements)


def _required_amount(required_lovelace: QuantityLike) -> int:
    amount = parse_quantity(required_lovelace)
    if amount < 0:
        raise ValueError(f"Required lovelace must be non-negative, got {amount}")
    return amount


class _RunningTotals:
    """Lovelace and per-unit totals accumulated during a selection pass"""

    def __init__(self):
        self.lovelace = 0
        self.assets: dict[str, int] = {}

    def add(self, utxo: UnspentOutput) -> None:
        self.lovelace += utxo.lovelace
        for unit, quantity in utxo.assets.items():
            self.assets[unit] = self.assets.get(unit, 0) + quantity

    def covers(self, required_lovelace: int, requirements: Sequence[AssetRequirement]) -> bool:
        if self.lovelace < required_lovelace:
            return False
        for requirement in requirements:
            collected = self.lovelace if requirement.unit == LOVELACE_UNIT else self.assets.get(requirement.unit, 0)
            if collected < requirement.quantity:
                return False
        return True


def _largest_first(
    candidates: list[UnspentOutput], required_lovelace: int, requirements: tuple[AssetRequirement, ...]
) -> list[UnspentOutput]:
    selected = []
    totals = _RunningTotals()

    # sorted() is stable with reverse=True, so equal outputs keep input order
    for utxo in sorted(candidates, key=lambda u: u.lovelace, reverse=True):
        selected.append(utxo)
        totals.add(utxo)
        if totals.covers(required_lovelace, requirements):
            break

    return selected


def _log_result(result: SelectionResult, candidate_count: int) -> SelectionResult:
    logger.debug(
        f"{result.algorithm.value}: selected {result.count}/{candidate_count} UTXOs, "
        f"total {result.total_lovelace} lovelace for {result.required_lovelace} required"
    )
    if not result.is_sufficient:
        logger.warning(
            f"{result.algorithm.value}: candidates exhausted, short by {result.shortfall_lovelace} lovelace"
            f" and assets {result.missing_assets}"
        )
    return result


def select_largest_first(
    utxos: Iterable[UtxoLike],
    required_lovelace: QuantityLike,
    required_assets: Optional[Iterable[RequirementLike]] = None,
) -> SelectionResult:
    """
    Largest-first coin selection

    Walks the candidates in descending lovelace order and stops as soon as
    the running totals cover the lovelace target and every asset requirement.
    Deterministic: equal inputs always give the same selection.

    Args:
        utxos: Candidate outputs
        required_lovelace: Lovelace target (int or decimal string)
        required_assets: Optional asset requirements as ``AssetRequirement``,
            ``{"unit", "quantity"}`` mappings or ``(unit, quantity)`` pairs

    Returns:
        SelectionResult, under-funded if the candidates run out

    Example:
        >>> result = select_largest_first(utxos, 3_000_000)
        >>> result.ensure_sufficient()
    """
    candidates = _coerce_utxos(utxos)
    required = _required_amount(required_lovelace)
    requirements = _coerce_requirements(required_assets)

    selected = _largest_first(candidates, required, requirements)

    result = SelectionResult(
        algorithm=SelectionAlgorithm.LARGEST_FIRST,
        selected=tuple(selected),
        required_lovelace=required,
        required_assets=requirements,
    )
    return _log_result(result, len(candidates))


def select_random_improve(
    utxos: Iterable[UtxoLike],
    required_lovelace: QuantityLike,
    required_assets: Optional[Iterable[RequirementLike]] = None,
    rng: Optional[random.Random] = None,
    settings: Optional[EngineSettings] = None,
) -> SelectionResult:
    """
    Random-improve coin selection

    Starts from the largest-first selection. When that baseline is already
    within ``improve_threshold_percent`` of the improvement target
    (``improve_target_multiplier`` x required) it is returned as is.
    Otherwise the remaining outputs are shuffled and appended one at a time
    until the target is reached or candidates run out.

    Args:
        utxos: Candidate outputs
        required_lovelace: Lovelace target (int or decimal string)
        required_assets: Optional asset requirements
        rng: Random source for the shuffle; pass a seeded ``random.Random``
            for reproducible selections. Defaults to ``random.SystemRandom``.
        settings: Engine settings override

    Returns:
        SelectionResult with the baseline outputs first
    """
    settings = settings or get_settings()
    rng = rng or random.SystemRandom()

    candidates = _coerce_utxos(utxos)
    required = _required_amount(required_lovelace)
    requirements = _coerce_requirements(required_assets)

    improved = _largest_first(candidates, required, requirements)

    target = required * settings.improve_target_multiplier
    totals = _RunningTotals()
    for utxo in improved:
        totals.add(utxo)

    if totals.lovelace < target * settings.improve_threshold_percent // 100:
        chosen = {utxo.ref for utxo in improved}
        remaining = [utxo for utxo in candidates if utxo.ref not in chosen]
        rng.shuffle(remaining)

        for utxo in remaining:
            if totals.lovelace >= target:
                break
            improved.append(utxo)
            totals.add(utxo)

    result = SelectionResult(
        algorithm=SelectionAlgorithm.RANDOM_IMPROVE,
        selected=tuple(improved),
        required_lovelace=required,
        required_assets=requirements,
    )
    return _log_result(result, len(candidates))


def select_utxos(
    utxos: Iterable[UtxoLike],
    required_lovelace: QuantityLike,
    required_assets: Optional[Iterable[RequirementLike]] = None,
    algorithm: Union[SelectionAlgorithm, str] = SelectionAlgorithm.LARGEST_FIRST,
    rng: Optional[random.Random] = None,
    settings: Optional[EngineSettings] = None,
) -> SelectionResult:
    """
    Run the named selection strategy

    Args:
        algorithm: ``"largestFirst"`` or ``"randomImprove"``
        rng: Random source, used by random-improve only
        settings: Engine settings override, used by random-improve only

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown
    """
    try:
        algorithm = SelectionAlgorithm(algorithm)
    except ValueError as e:
        raise UnsupportedAlgorithmError(f"Unsupported coin selection algorithm: {algorithm}") from e

    if algorithm == SelectionAlgorithm.RANDOM_IMPROVE:
        return select_random_improve(utxos, required_lovelace, required_assets, rng=rng, settings=settings)
    return select_largest_first(utxos, required_lovelace, required_assets)


def find_collateral_utxos(
    utxos: Iterable[UtxoLike],
    minimum_lovelace: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> list[UnspentOutput]:
    """
    Outputs usable as script collateral

    Collateral must hold ADA only, carry no datum or reference script and
    hold at least ``minimum_lovelace`` (5 ADA by default). Input order is
    preserved.
    """
    if minimum_lovelace is None:
        minimum_lovelace = (settings or get_settings()).collateral_min_lovelace

    return [
        utxo
        for utxo in _coerce_utxos(utxos)
        if utxo.is_pure_ada
        and not utxo.has_datum
        and utxo.reference_script_hash is None
        and utxo.lovelace >= minimum_lovelace
    ]
