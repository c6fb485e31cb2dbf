"""Assembly and validation of a calculation's input values."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from incomecalc.schema.inputs import Input, InputValue


def resolve_inputs(
    declared: Sequence[Input], supplied: Optional[Mapping[str, InputValue]] = None
) -> Dict[str, InputValue]:
    """
    Merge caller supplied values with declared defaults.

    Every supplied value is kept. Declared inputs without a supplied value get
    their default, or a type appropriate fallback (empty text, the minimum,
    False, the first select option). Inputs with neither stay unset.
    """
    values: Dict[str, InputValue] = dict(supplied or {})
    for spec in declared:
        if values.get(spec.id) is not None:
            continue
        fallback = spec.fallback_value()
        if fallback is not None:
            values[spec.id] = fallback
        else:
            values.pop(spec.id, None)
    return values


def validate_inputs(
    declared: Sequence[Input], supplied: Optional[Mapping[str, InputValue]] = None
) -> Dict[str, List[str]]:
    """Check supplied values against their declarations; only failing inputs are returned."""
    supplied = supplied or {}
    problems: Dict[str, List[str]] = {}
    for spec in declared:
        issues = spec.validate(supplied.get(spec.id))
        if issues:
            problems[spec.id] = issues
    return problems
